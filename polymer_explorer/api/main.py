"""FastAPI 主应用"""

from contextlib import asynccontextmanager
from typing import Dict, List

from fastapi import FastAPI, HTTPException, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from polymer_explorer.core.config import settings
from polymer_explorer.engines.dataset_manager import UnknownPropertyError, DatasetValidationError
from polymer_explorer.engines.query_engine import QueryEngine, QueryExecutionError, get_query_engine
from polymer_explorer.engines.plot_engine import PlotEngine, get_plot_engine
from polymer_explorer.models.dataset import Experiment, PropertyList, PropertyRange, FormattedExperiment
from polymer_explorer.models.query import (
    DataPoint,
    PointsRequest,
    FilterRequest,
    FilterResult,
    FilterSummary,
    GroupRequest,
    CorrelationResult
)
from polymer_explorer.models.plot import ChartSpec, ChartOutput
from polymer_explorer.utils.logger import log


@asynccontextmanager
async def lifespan(app: FastAPI):
    """启动时加载数据集，格式错误立即失败"""
    try:
        engine = get_query_engine()
    except DatasetValidationError as e:
        log.error(f"数据集加载失败: {e}")
        raise
    log.info(f"服务已就绪: {engine.dataset_manager.get_summary()}")
    yield


# 创建应用
app = FastAPI(
    title="Polymer Experiment Explorer",
    description="聚合物配方实验数据集统计、投影与过滤服务",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UnknownPropertyError)
async def unknown_property_handler(request: Request, exc: UnknownPropertyError):
    """未知属性名视为参数错误"""
    log.warning(f"未知属性: {exc.name} | {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "property": exc.name, "available": exc.available},
    )


@app.exception_handler(QueryExecutionError)
async def query_execution_handler(request: Request, exc: QueryExecutionError):
    log.error(f"查询执行失败: {exc} | {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/")
async def root():
    """根路径"""
    return {
        "name": "Polymer Experiment Explorer",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health(engine: QueryEngine = Depends(get_query_engine)):
    """健康检查"""
    return {"status": "healthy", "dataset": engine.dataset_manager.get_summary()}


@app.get("/properties", response_model=PropertyList)
def list_properties(engine: QueryEngine = Depends(get_query_engine)):
    """获取属性列表"""
    return engine.dataset_manager.list_properties()


@app.get("/defaults")
def get_defaults():
    """浏览器默认坐标轴与颜色属性"""
    return {
        "x_property": settings.default_x_property,
        "y_property": settings.default_y_property,
        "z_property": settings.default_z_property,
        "color_property": settings.default_color_property
    }


@app.get("/stats", response_model=Dict[str, PropertyRange])
def get_stats(engine: QueryEngine = Depends(get_query_engine)):
    """获取属性统计（最小/最大值）"""
    return engine.compute_stats()


@app.post("/points", response_model=List[DataPoint])
def create_points(request: PointsRequest, engine: QueryEngine = Depends(get_query_engine)):
    """生成数据点（原始值）"""
    return engine.create_data_points(
        request.x_property,
        request.y_property,
        request.z_property,
        request.color_property,
        ids=request.ids,
        include_experiment=request.include_experiment
    )


@app.post("/filter", response_model=FilterResult)
def filter_experiments(request: FilterRequest, engine: QueryEngine = Depends(get_query_engine)):
    """按属性范围过滤实验"""
    ids = engine.filter_experiments(request.filters)
    return FilterResult(
        ids=ids,
        matched=len(ids),
        total=len(engine.dataset_manager.experiments),
        summaries=[FilterSummary(property=f.property, range=f.summary()) for f in request.filters]
    )


@app.post("/groups", response_model=Dict[str, List[str]])
def group_experiments(request: GroupRequest, engine: QueryEngine = Depends(get_query_engine)):
    """按属性区间分组实验"""
    return engine.group_by_ranges(request.property, request.boundaries)


@app.get("/correlation", response_model=CorrelationResult)
def get_correlation(
    a: str = Query(..., description="属性 A"),
    b: str = Query(..., description="属性 B"),
    engine: QueryEngine = Depends(get_query_engine)
):
    """计算两个属性的 Pearson 相关系数"""
    try:
        r = engine.correlation(a, b)
    except UnknownPropertyError:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CorrelationResult(property_a=a, property_b=b, r=r)


@app.get("/experiments/{experiment_id}", response_model=Experiment)
def get_experiment(experiment_id: str, engine: QueryEngine = Depends(get_query_engine)):
    """获取实验记录"""
    experiment = engine.dataset_manager.get_experiment(experiment_id)
    if experiment is None:
        raise HTTPException(status_code=404, detail=f"实验不存在: {experiment_id}")
    return experiment


@app.get("/experiments/{experiment_id}/formatted", response_model=FormattedExperiment)
def get_formatted_experiment(experiment_id: str, engine: QueryEngine = Depends(get_query_engine)):
    """获取用于详情面板的实验记录"""
    formatted = engine.dataset_manager.get_formatted_experiment(experiment_id)
    if formatted is None:
        raise HTTPException(status_code=404, detail=f"实验不存在: {experiment_id}")
    return formatted


@app.post("/chart", response_model=ChartOutput)
def create_chart(
    spec: ChartSpec,
    engine: QueryEngine = Depends(get_query_engine),
    plot_engine: PlotEngine = Depends(get_plot_engine)
):
    """
    生成 ECharts 散点图配置

    2D 模式下 z 坐标沿用 Y 轴属性。
    """
    stats = engine.compute_stats()
    points = engine.create_data_points(
        spec.x_property,
        spec.y_property,
        spec.z_property or spec.y_property,
        spec.color_property,
        stats,
        ids=spec.ids,
        include_experiment=False
    )
    try:
        return plot_engine.generate(spec, points, stats)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


if __name__ == "__main__":
    import uvicorn

    log.info(f"启动服务: {settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "polymer_explorer.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
