"""Tests for resource_sampler/main.py exit codes."""

import pytest

from resource_sampler import main as main_module
from resource_sampler.main import main

ENV_VARS = (
    "ENABLED_SOURCES", "DELAY_SECONDS", "OUTPUT_DIR", "BUILD_STATUS_URL",
    "HTTP_TIMEOUT", "SOURCES_FILE", "LOG_LEVEL",
)


@pytest.fixture
def env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setattr(main_module.signal, "signal", lambda *_args: None)
    return monkeypatch


# ── startup failures ─────────────────────────────────────────────────

class TestStartupFailures:
    def test_invalid_delay_exits_1(self, env):
        env.setenv("DELAY_SECONDS", "nan")
        assert main() == 1

    def test_unknown_mask_name_exits_1(self, env):
        env.setenv("ENABLED_SOURCES", "disk,gpu")
        assert main() == 1

    def test_unsupported_scheme_exits_1(self, env, tmp_path):
        sources_file = tmp_path / "sources.yml"
        sources_file.write_text(
            "sources:\n"
            "  - name: Remote\n"
            "    out_filename: r-remote.csv\n"
            "    in_location: ftp://example.com/stats\n"
            "    columns: [a]\n"
        )
        env.setenv("SOURCES_FILE", str(sources_file))
        assert main() == 1
        assert not (tmp_path / "out").exists()

    def test_malformed_sources_file_exits_1(self, env, tmp_path):
        sources_file = tmp_path / "sources.yml"
        sources_file.write_text("sources: [unclosed\n")
        env.setenv("SOURCES_FILE", str(sources_file))
        assert main() == 1

    def test_unopenable_output_dir_exits_1(self, env, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        env.setenv("OUTPUT_DIR", str(blocker / "sub"))
        assert main() == 1


# ── normal run ───────────────────────────────────────────────────────

class TestRun:
    def test_clean_run_exits_0_and_opens_enabled_outputs(self, env, tmp_path):
        calls = []
        env.setattr(main_module.Sampler, "run", lambda self, max_ticks=None: calls.append(self))
        env.setenv("ENABLED_SOURCES", "mem,cpu")
        assert main() == 0
        assert len(calls) == 1
        out = tmp_path / "out"
        assert (out / "r-mem.csv").read_text() == "datetime,free_mem,free_swap\n"
        assert (out / "r-cpu.csv").exists()
        assert not (out / "r-disk.csv").exists()
