import sys
from pathlib import Path

# allow running the suite from a checkout without `pip install -e .`
_SRC = Path(__file__).parent / "src"
if _SRC.is_dir() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: end-to-end training runs (deselect with '-m \"not slow\"')"
    )
