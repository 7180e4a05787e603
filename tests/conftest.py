import pytest


PAGE = """<html>
<head><title>Page title</title><meta charset="utf-8"></head>
<body>
<header class="site"><nav>Home About Contact</nav></header>
<script type="text/javascript">var tracking = 1;</script>
<div id="ad-banner">Buy now</div>
<main>
<p>The quick brown fox jumps over the lazy dog near the river bank.</p>
<p>Simhash fingerprints let us spot near duplicate pages quickly.</p>
</main>
<footer>Copyright notice</footer>
</body>
</html>
"""


@pytest.fixture(autouse=True)
def pagesim_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    monkeypatch.setenv("PAGESIM_HOME", str(home))
    return home


@pytest.fixture
def page() -> str:
    return PAGE


@pytest.fixture
def write_page(tmp_path):
    def _write(name: str, text: str):
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _write
