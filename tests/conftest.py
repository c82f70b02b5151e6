import json

import pytest

DISKSTATS = (
    "   8       0 sda 1200 30 4800 700 900 20 7200 1500 0 2100 2200\n"
    "   8       1 sda1 100 0 400 50 80 0 640 90 0 130 140\n"
    "   8      16 sdb 300 5 1200 100 200 4 1600 300 0 350 400\n"
    " 259       0 nvme0n1 999 9 9999 99 999 9 9999 99 0 99 99\n"
)

MEMINFO = (
    "MemTotal:       16384000 kB\n"
    "MemFree:            2048 kB\n"
    "MemAvailable:       4096 kB\n"
    "SwapTotal:          1024 kB\n"
    "SwapFree:            512 kB\n"
)

PROC_STAT = (
    "cpu  300 10 400 1800 20 0 0 0 0 0\n"
    "cpu0 100 5 200 900 10 0 0 0 0 0\n"
    "cpu1 200 5 200 900 10 0 0 0 0 0\n"
    "intr 12345 0 0\n"
    "ctxt 67890\n"
)


@pytest.fixture
def build_status_doc():
    return {
        "buildable": True,
        "lastBuild": {"number": 42},
        "lastCompletedBuild": {"number": 41},
        "healthReport": [
            {"description": "Build stability", "score": 80},
            {"description": "Test results", "score": 95},
        ],
    }


@pytest.fixture
def build_status_text(build_status_doc):
    return json.dumps(build_status_doc, indent=2)


@pytest.fixture
def proc_dir(tmp_path):
    """A fake /proc with diskstats, meminfo and stat."""
    (tmp_path / "diskstats").write_text(DISKSTATS)
    (tmp_path / "meminfo").write_text(MEMINFO)
    (tmp_path / "stat").write_text(PROC_STAT)
    return tmp_path
