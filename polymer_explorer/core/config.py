"""系统配置管理"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """系统配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # 数据集配置（为空时使用内置样例数据集）
    dataset_path: Optional[Path] = None

    # 浏览器默认坐标轴与颜色属性
    default_x_property: str = "Polymer 1"
    default_y_property: str = "Polymer 2"
    default_z_property: str = "Viscosity"
    default_color_property: str = "Tensile Strength"

    # 图表归一化范围（[-scale, scale]）
    normalize_scale: float = 1.0

    # 服务器配置
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # 日志配置
    log_level: str = "INFO"
    log_file: Path = Path("./logs/app.log")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # 确保日志目录存在
        self.log_file.parent.mkdir(parents=True, exist_ok=True)


# 全局配置实例
settings = Settings()
