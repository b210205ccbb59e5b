"""CLI 测试共享夹具"""

import json
import shutil
import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner

from idot.core.logger import LoggerConfig, configure_logger


@pytest.fixture
def temp_dir():
    """创建临时目录"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path).resolve()
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def home(temp_dir):
    home_dir = temp_dir / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def workspace(temp_dir):
    """创建带 idot.json 的工作区"""
    ws = temp_dir / "ws"
    ws.mkdir()
    (ws / "vimrc").write_text("set number")
    (ws / "bashrc").write_text("export EDITOR=vim")
    (ws / "idot.json").write_text(json.dumps({
        "links": {
            "~/.vimrc": {"target": "vimrc"},
            "~/.bashrc": {"target": "bashrc", "relative": False},
        },
    }))
    return ws


@pytest.fixture
def invoke(home):
    """在替换了 HOME 的环境中运行 CLI"""
    from idot.cli.main import cli

    runner = CliRunner()

    def _invoke(*args, color=False):
        return runner.invoke(cli, list(args), env={"HOME": str(home)}, color=color)

    yield _invoke
    # CLI 会把处理器绑定到 CliRunner 的输出流上
    configure_logger(LoggerConfig())
