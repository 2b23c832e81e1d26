import os

from invoke import task, Context


IS_CI = os.getenv("GITHUB_ACTIONS") == "true"


@task
def doc(c: Context):
    """Generate documentation"""
    c.run("pdoc -o ./doc aio_geojson/", echo=True, pty=True)


@task
def doco(c: Context):
    """Generate documentation and open in browser"""
    from pathlib import Path
    import webbrowser

    doc(c)

    path = Path(__file__).parent / "doc" / "index.html"
    url = f"file://{path}"
    webbrowser.open(url, new=0, autoraise=True)


@task
def fmt(c: Context):
    """Run code formatters"""
    c.run("isort aio_geojson test", echo=True, pty=True)
    c.run("ruff format aio_geojson test tasks.py", echo=True, pty=True)


@task
def install(c: Context):
    """Install all dependencies"""
    c.run("pip install -e '.[test,dev]'", echo=True, pty=True)


@task
def lint(c: Context):
    """Run linter and type checker"""
    c.run("ruff check aio_geojson/", echo=True, warn=True, pty=True)
    c.run("mypy aio_geojson/", echo=True, warn=True, pty=True)


@task
def test(c: Context):
    """Run all tests in parallel"""
    _pytest(c, cov=not IS_CI, parallel=True)


@task
def test_cov(c: Context):
    """Run all tests in parallel, with coverage report"""
    _pytest(c, cov=True, parallel=True)


@task
def test_quick(c: Context):
    """Run all tests in a single process"""
    _pytest(c, cov=False, parallel=False)


def _pytest(c: Context, *, cov: bool, parallel: bool):
    cmd = ["pytest", "-vv"]

    if cov:
        cmd.append("--cov=aio_geojson/")

    if cov and IS_CI:
        cmd.append("--cov-report=xml")

    if parallel:
        cmd.append("--numprocesses=auto")
        cmd.append("--dist=loadgroup")

    c.run(" ".join(cmd), echo=True, pty=True)

    if cov and not IS_CI:
        c.run("rm .coverage*", echo=True, pty=True)


@task
def build(c: Context):
    """Build the source distribution and wheel"""
    c.run("python -m build", echo=True, pty=True)
