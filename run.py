"""启动脚本"""

import uvicorn
from polymer_explorer.core.config import settings
from polymer_explorer.utils.logger import log


if __name__ == "__main__":
    log.info("="*60)
    log.info("Polymer Experiment Explorer - 启动中")
    log.info("="*60)
    log.info(f"服务地址: http://{settings.api_host}:{settings.api_port}")
    log.info(f"API 文档: http://{settings.api_host}:{settings.api_port}/docs")
    log.info(f"调试模式: {settings.debug}")
    log.info(f"数据集: {settings.dataset_path or '内置样例数据集'}")
    log.info("="*60)

    uvicorn.run(
        "polymer_explorer.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info"
    )
