import textwrap

from typer.testing import CliRunner

from unittester.cli import app

runner = CliRunner()


def _script(tmp_path, body: str):
    path = tmp_path / "checks.py"
    path.write_text(textwrap.dedent(body))
    return path


def test_run_passing_script(tmp_path):
    script = _script(tmp_path, """\
        test("adds").expect_value(2, lambda: 1 + 1)
        test.expect_true("truthy", lambda: [1])
    """)
    result = runner.invoke(app, ["run", str(script), "--no-color"])
    assert result.exit_code == 0
    assert "☑  PASS  adds" in result.output
    assert "2 tests passed." in result.output
    assert "FAILED" not in result.output


def test_run_failing_script_exits_non_zero(tmp_path):
    script = _script(tmp_path, """\
        test("adds").expect_value(3, lambda: 1 + 1)
    """)
    result = runner.invoke(app, ["run", str(script), "--no-color"])
    assert result.exit_code == 1
    assert "☒  FAIL  adds" in result.output
    assert "1 tests FAILED !" in result.output


def test_run_only_and_hide_pass(tmp_path):
    script = _script(tmp_path, """\
        test("fast.one").expect_true(lambda: True)
        test("slow.one").expect_true(lambda: False)
    """)
    result = runner.invoke(
        app, ["run", str(script), "--no-color", "--hide-pass", "--only", "fast.*"]
    )
    assert result.exit_code == 0
    assert "PASS" not in result.output
    assert "1 tests skipped." in result.output
    assert "1 tests passed." in result.output


def test_run_with_config(tmp_path):
    script = _script(tmp_path, """\
        test("keep").expect_true(lambda: True)
        test("drop").expect_true(lambda: False)
    """)
    config = tmp_path / "unittester.yaml"
    config.write_text("color: false\nexclude: [drop]\n")
    result = runner.invoke(app, ["run", str(script), "--config", str(config)])
    assert result.exit_code == 0
    assert "\x1b[" not in result.output
    assert "1 tests skipped." in result.output


def test_run_invalid_config(tmp_path):
    script = _script(tmp_path, "pass\n")
    config = tmp_path / "unittester.yaml"
    config.write_text("colour: false\n")
    result = runner.invoke(app, ["run", str(script), "--config", str(config)])
    assert result.exit_code == 1


def test_run_missing_config(tmp_path):
    script = _script(tmp_path, "pass\n")
    result = runner.invoke(app, ["run", str(script), "--config", "nope.yaml"])
    assert result.exit_code == 1


def test_run_missing_script():
    result = runner.invoke(app, ["run", "nonexistent_checks.py"])
    assert result.exit_code == 1


def test_run_script_error_prints_summary(tmp_path):
    script = _script(tmp_path, """\
        test("before").expect_true(lambda: True)
        raise RuntimeError("script broke")
    """)
    result = runner.invoke(app, ["run", str(script), "--no-color"])
    assert result.exit_code == 1
    assert "1 tests passed." in result.output


def test_run_debug_log(tmp_path):
    script = _script(tmp_path, """\
        test("logged").expect_value(1, lambda: 2)
    """)
    debug_log = tmp_path / "logs" / "debug.log"
    result = runner.invoke(
        app, ["run", str(script), "--no-color", "--debug-log", str(debug_log)]
    )
    assert result.exit_code == 1
    content = debug_log.read_text()
    assert "Running" in content
    assert "FAIL logged" in content


def test_init_creates_example_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0
    assert (tmp_path / "unittester" / "unittester.yaml").exists()
    assert (tmp_path / "unittester" / "example_tests.py").exists()


def test_init_skips_existing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner.invoke(app, ["init", "--dir", "ex"])
    result = runner.invoke(app, ["init", "--dir", "ex"])
    assert result.exit_code == 0
    assert "skipping" in result.output
    assert (tmp_path / "ex" / "example_tests.py").exists()


def test_init_example_runs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("UNITTESTER_ONLY", raising=False)
    runner.invoke(app, ["init", "--dir", "ex"])
    result = runner.invoke(
        app,
        [
            "run",
            "ex/example_tests.py",
            "--config",
            "ex/unittester.yaml",
            "--no-color",
        ],
    )
    assert result.exit_code == 0
    assert "4 tests passed." in result.output


def test_run_sys_exit_keeps_failures(tmp_path):
    script = _script(tmp_path, """\
        import sys

        test("bad").expect_value(3, lambda: 1 + 1)
        sys.exit(0)
    """)
    result = runner.invoke(app, ["run", str(script), "--no-color"])
    assert result.exit_code == 1
    assert "1 tests FAILED !" in result.output


def test_run_sys_exit_status_is_kept(tmp_path):
    script = _script(tmp_path, """\
        import sys

        test("good").expect_true(lambda: True)
        sys.exit(3)
    """)
    result = runner.invoke(app, ["run", str(script), "--no-color"])
    assert result.exit_code == 3
    assert "1 tests passed." in result.output


def test_run_only_expands_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("SEL", "keep")
    script = _script(tmp_path, """\
        test("keep").expect_true(lambda: True)
        test("drop").expect_true(lambda: True)
    """)
    result = runner.invoke(app, ["run", str(script), "--no-color", "--only", "${SEL}"])
    assert result.exit_code == 0
    assert "☑  PASS  keep" in result.output
    assert "1 tests skipped." in result.output
    assert "1 tests passed." in result.output


def test_run_cli_flags_override_config_both_ways(tmp_path):
    script = _script(tmp_path, """\
        test("shown").expect_true(lambda: True)
    """)
    config = tmp_path / "unittester.yaml"
    config.write_text("color: false\nhide_pass: true\n")
    result = runner.invoke(
        app, ["run", str(script), "--config", str(config), "--color", "--show-pass"]
    )
    assert result.exit_code == 0
    assert "\x1b[32m☑  PASS  \x1b[0mshown" in result.output
