"""Tests for resource_sampler/formatter.py"""

from resource_sampler.formatter import format_banner, format_header, format_line, format_summary
from resource_sampler.models import SourceDefinition

MEM = SourceDefinition(
    id=2,
    name="Memory",
    out_filename="r-mem.csv",
    in_location="/proc/meminfo",
    columns=("free_mem", "free_swap"),
    summary_lines=("FREE: RAM: %free_mem% kB, swap: %free_swap% kB",),
)


class TestFormatter:
    def test_banner(self):
        assert format_banner(1, "2025-05-15 14:30:00") == \
            "============== 1 SECOND DELAY (2025-05-15 14:30:00) =============="

    def test_header_is_upper_cased(self):
        disk = SourceDefinition(id=1, name="Disk I/O", out_filename="d", in_location="/x", columns=())
        assert format_header(disk) == "-- DISK I/O SUMMARY (LOGGED) --"

    def test_placeholders_substituted(self):
        line = format_line(MEM.summary_lines[0], MEM.columns, {"free_mem": 2048, "free_swap": 512})
        assert line == "FREE: RAM: 2048 kB, swap: 512 kB"

    def test_unset_placeholders_render_zero(self):
        line = format_line(MEM.summary_lines[0], MEM.columns, {"free_mem": 2048})
        assert line == "FREE: RAM: 2048 kB, swap: 0 kB"

    def test_repeated_placeholder(self):
        assert format_line("%a% / %a%", ("a",), {"a": 3}) == "3 / 3"

    def test_unknown_placeholder_left_alone(self):
        assert format_line("%a% %zzz%", ("a",), {"a": 1}) == "1 %zzz%"

    def test_value_with_backslash_is_literal(self):
        assert format_line("%a%", ("a",), {"a": r"c:\1"}) == r"c:\1"

    def test_summary(self):
        lines = format_summary(MEM, {})
        assert lines == [
            "-- MEMORY SUMMARY (LOGGED) --",
            "FREE: RAM: 0 kB, swap: 0 kB",
        ]
