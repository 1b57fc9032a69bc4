import pytest
from tinymip.solvers import _SOLVER_BACKENDS


FACTORY_EXAMPLE = """[.##.] (3) (1,3) (2) (2,3) (0,2) (0,1) {3,5,4,7}
[...#.] (0,2,3,4) (2,3) (0,4) (0,1,2) (1,2,3,4) {7,5,12,7,2}
[.###.#] (0,1,2,3,4) (0,3,4) (0,1,2,4,5) (1,2) {10,11,11,5,10,5}"""


@pytest.fixture(autouse=True)
def restore_solver_backends():
    """Undo backend registrations made by a test"""
    saved = dict(_SOLVER_BACKENDS)
    yield
    _SOLVER_BACKENDS.clear()
    _SOLVER_BACKENDS.update(saved)


@pytest.fixture
def factory_example():
    return FACTORY_EXAMPLE
