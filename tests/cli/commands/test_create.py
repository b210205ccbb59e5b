"""idot create 命令的单元测试"""

import json
import os


class TestCreateCommand:
    """创建命令测试类"""

    def test_create_links(self, invoke, workspace, home):
        """测试按配置创建所有链接"""
        result = invoke("--no-color", "-w", str(workspace), "create")

        assert result.exit_code == 0
        assert (home / ".vimrc").is_symlink()
        assert not os.path.isabs(os.readlink(home / ".vimrc"))
        assert os.readlink(home / ".bashrc") == str(workspace / "bashrc")
        assert f"+ Create `{home / '.vimrc'}` -> `{workspace / 'vimrc'}`." in result.output

    def test_create_reports_failure_and_continues(self, invoke, workspace, home):
        """测试单个链接失败时仍以 0 退出并处理其余链接"""
        (home / ".vimrc").write_text("local")

        result = invoke("--no-color", "-w", str(workspace), "create")

        assert result.exit_code == 0
        assert "- Failed to create `~/.vimrc`." in result.output
        assert (home / ".vimrc").read_text() == "local"
        assert (home / ".bashrc").is_symlink()

    def test_create_force_flag_overrides(self, invoke, workspace, home):
        """测试 --force 覆盖已有文件"""
        (home / ".vimrc").write_text("local")

        result = invoke("-w", str(workspace), "create", "--force")

        assert result.exit_code == 0
        assert (home / ".vimrc").is_symlink()

    def test_create_simulate(self, invoke, workspace, home):
        """测试 --simulate 不创建任何链接"""
        result = invoke("--no-color", "-s", "-w", str(workspace), "create")

        assert result.exit_code == 0
        assert "(simulate)" in result.output
        assert os.listdir(home) == []

    def test_create_debug_logging(self, invoke, workspace, home):
        """测试 --debug 输出调试日志"""
        result = invoke("-d", "-w", str(workspace), "create")

        assert result.exit_code == 0
        assert "Create symbolic link" in result.output

    def test_create_log_dir(self, invoke, workspace, home, temp_dir):
        """测试 --log-dir 把日志写入 idot.log，且不输出到控制台"""
        log_dir = temp_dir / "logs"

        result = invoke("--no-color", "--log-dir", str(log_dir), "-w", str(workspace), "create")

        assert result.exit_code == 0
        content = (log_dir / "idot.log").read_text()
        assert "Created link" in content
        assert str(home / ".vimrc") in content
        assert "Created link" not in result.output

    def test_create_json_log(self, invoke, workspace, home, temp_dir):
        """测试 --json-log 以 JSON 行写入日志文件"""
        log_dir = temp_dir / "logs"

        result = invoke("--log-dir", str(log_dir), "--json-log", "-w", str(workspace), "create")

        assert result.exit_code == 0
        events = [json.loads(line) for line in (log_dir / "idot.log").read_text().splitlines()]
        created = [event for event in events if event["event"] == "Created link"]
        assert [event["link"] for event in created] == [str(home / ".vimrc"), str(home / ".bashrc")]
        assert all(event["level"] == "info" for event in created)
