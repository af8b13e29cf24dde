from pathlib import Path

import core
from core import templating


def test_templates_and_static_ship_inside_core_package():
    package_dir = Path(core.__file__).resolve().parent

    assert templating.TEMPLATES_DIR.parent == package_dir
    assert templating.STATIC_DIR.parent == package_dir
    assert (templating.TEMPLATES_DIR / "base.html").is_file()
    assert (templating.STATIC_DIR / "styles.css").is_file()


def test_pyproject_declares_template_package_data():
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    text = pyproject.read_text(encoding="utf-8")

    assert 'core = ["templates/*.html", "static/*.css"]' in text
