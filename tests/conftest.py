"""共享测试夹具"""

import pytest

from polymer_explorer.core.constants import SAMPLE_DATASET_PATH
from polymer_explorer.engines.dataset_manager import DatasetManager
from polymer_explorer.engines.query_engine import QueryEngine


def make_record(inputs, outputs):
    return {"inputs": dict(inputs), "outputs": dict(outputs)}


@pytest.fixture(scope="session")
def sample_manager():
    """内置 25 条样例数据集"""
    return DatasetManager.from_file(SAMPLE_DATASET_PATH)


@pytest.fixture(scope="session")
def sample_engine(sample_manager):
    engine = QueryEngine(sample_manager)
    yield engine
    engine.close()


@pytest.fixture
def small_raw():
    """三条实验的小数据集，Antioxidant 为常量列"""
    return {
        "EXP_A": make_record(
            {"Polymer 1": 10.0, "Antioxidant": 2.0, "Oven Temperature": 350.0},
            {"Viscosity": 2000.0, "Cure Time": 3.1}
        ),
        "EXP_B": make_record(
            {"Polymer 1": 20.0, "Antioxidant": 2.0, "Oven Temperature": 400.0},
            {"Viscosity": 2500.0, "Cure Time": 3.0}
        ),
        "EXP_C": make_record(
            {"Polymer 1": 30.0, "Antioxidant": 2.0, "Oven Temperature": 425.0},
            {"Viscosity": 3000.0, "Cure Time": 2.5}
        ),
    }


@pytest.fixture
def small_engine(small_raw):
    engine = QueryEngine(DatasetManager.from_dict(small_raw))
    yield engine
    engine.close()
