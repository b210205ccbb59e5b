"""端到端测试：从配置文件到文件系统的完整流程"""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from idot.core.configuration import load_configuration
from idot.core.data_structures import LinkStatus
from idot.core.linker import Linker


@pytest.fixture
def env():
    """准备工作区、主目录和工作区外的文件"""
    temp_path = tempfile.mkdtemp()
    root = Path(temp_path).resolve()
    ws = root / "ws"
    home = root / "home"
    etc = root / "etc"
    for directory in (ws, home, etc):
        directory.mkdir()
    (ws / "vimrc").write_text("set number")
    (ws / "bashrc").write_text("export EDITOR=vim")
    (etc / "bashrc").write_text("system")

    with patch.dict(os.environ, {"HOME": str(home)}):
        yield {"root": root, "ws": ws, "home": home, "etc": etc}
    shutil.rmtree(temp_path, ignore_errors=True)


class TestScenarios:
    """典型场景"""

    def test_create_then_status_relative(self, env):
        """新链接默认以相对形式创建，之后状态为激活"""
        ws, home = env["ws"], env["home"]
        (ws / "idot.yaml").write_text("links:\n  ~/.vimrc:\n    target: vimrc\n")
        config = load_configuration(ws)
        linker = Linker()

        linker.create(ws, config)

        content = os.readlink(home / ".vimrc")
        assert not os.path.isabs(content)
        assert Path(os.path.normpath(home / content)) == ws / "vimrc"
        assert linker.status(ws, config)[0].status == LinkStatus.ACTIVE

    def test_existing_file_without_force(self, env):
        """已有普通文件时失败，文件不变，其余链接继续"""
        ws, home = env["ws"], env["home"]
        (home / ".vimrc").write_text("local")
        (ws / "idot.toml").write_text(
            '[links."~/.vimrc"]\ntarget = "vimrc"\n'
            '[links."~/.bashrc"]\ntarget = "bashrc"\n'
        )
        config = load_configuration(ws)

        outcomes = Linker().create(ws, config)

        assert [outcome.success for outcome in outcomes] == [False, True]
        assert (home / ".vimrc").read_text() == "local"
        assert (home / ".bashrc").is_symlink()

    def test_foreign_link_left_alone(self, env):
        """指向工作区外的链接为未激活，delete 不处理"""
        ws, home, etc = env["ws"], env["home"], env["etc"]
        os.symlink(etc / "bashrc", home / ".bashrc")
        (ws / "idot.json").write_text('{"links": {"~/.bashrc": {"target": "bashrc"}}}')
        config = load_configuration(ws)
        linker = Linker()

        assert linker.status(ws, config)[0].status == LinkStatus.INACTIVE
        outcomes = linker.delete(ws, config)

        assert outcomes[0].skipped
        assert os.readlink(home / ".bashrc") == str(etc / "bashrc")

    def test_owned_link_deleted(self, env):
        """指向工作区文件的链接为激活，delete 将其删除"""
        ws, home = env["ws"], env["home"]
        os.symlink(ws / "bashrc", home / ".bashrc")
        (ws / "idot.json").write_text('{"links": {"~/.bashrc": {"target": "bashrc"}}}')
        config = load_configuration(ws)
        linker = Linker()

        assert linker.status(ws, config)[0].status == LinkStatus.ACTIVE
        outcomes = linker.delete(ws, config)

        assert outcomes[0].success
        assert not os.path.lexists(home / ".bashrc")
        assert (ws / "bashrc").read_text() == "export EDITOR=vim"

    def test_full_cycle_is_repeatable(self, env):
        """create / delete 可以反复执行"""
        ws, home = env["ws"], env["home"]
        (ws / "idot.json").write_text(
            '{"force": true, "links": {"~/.vimrc": {"target": "vimrc"},'
            ' "~/.config/bash/bashrc": {"target": "bashrc", "relative": false}}}'
        )
        config = load_configuration(ws)
        linker = Linker()

        for _ in range(2):
            assert all(outcome.success for outcome in linker.create(ws, config))
            assert all(report.is_active for report in linker.status(ws, config))
            assert all(outcome.success for outcome in linker.delete(ws, config))
            assert not os.path.lexists(home / ".vimrc")
            assert (home / ".config" / "bash").is_dir()
