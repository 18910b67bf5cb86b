import re

import pytest

from hud_exporter.core.models import MetricsSnapshot
from hud_exporter.exporter.metric_definitions import MetricDefinitions
from hud_exporter.exporter.renderer import escape_label_value, render_metrics


TS = 1700000000000

EXPECTED_NAMES = [
    "mangohud_fps_current",
    "mangohud_frametime_ms",
    "mangohud_cpu_load_percent",
    "mangohud_cpu_power_watts",
    "mangohud_cpu_frequency_mhz",
    "mangohud_cpu_temperature_celsius",
    "mangohud_gpu_load_percent",
    "mangohud_gpu_temperature_celsius",
    "mangohud_gpu_core_clock_mhz",
    "mangohud_gpu_memory_clock_mhz",
    "mangohud_gpu_power_watts",
    "mangohud_gpu_vram_used_gb",
    "mangohud_ram_used_gb",
    "mangohud_swap_used_gb",
    "mangohud_process_rss_gb",
]


@pytest.fixture
def snapshot():
    return MetricsSnapshot(
        fps=60.0,
        frametime=16.667,
        cpu_load=23.4,
        cpu_power=45.26,
        cpu_mhz=4200,
        cpu_temp=65,
        gpu_load=97.0,
        gpu_temp=72,
        gpu_core_clock=2100,
        gpu_mem_clock=10000,
        gpu_power=220.5,
        gpu_vram_used=6.5,
        ram_used=12.25,
        swap_used=0.5,
        process_rss=2.125,
        process_name="game",
        graphics_api="vulkan",
        process_pid=1234,
    )


@pytest.mark.parametrize(
    "raw, escaped",
    [
        ("plain", "plain"),
        ('say "hi"', 'say \\"hi\\"'),
        ("C:\\Games", "C:\\\\Games"),
        ("a\nb", "a\\nb"),
        ("a\rb", "a\\rb"),
        ("a\tb", "a\\tb"),
        ("", ""),
        ("ünïcode", "ünïcode"),
    ],
)
def test_escape_label_value(raw, escaped):
    assert escape_label_value(raw) == escaped


@pytest.mark.parametrize(
    "raw",
    ['\\"', "\\\\\\n", '"\n\r\t\\', "trailing\\", 'x"y"z', "\t\t", "mix \\n literal"],
)
def test_escaped_output_has_no_raw_special_characters(raw):
    escaped = escape_label_value(raw)
    i = 0
    while i < len(escaped):
        c = escaped[i]
        assert c not in '"\n\r\t'
        if c == "\\":
            assert escaped[i + 1] in '\\"nrt'
            i += 2
        else:
            i += 1


def test_fps_stanza(snapshot):
    lines = render_metrics(snapshot, timestamp_ms=TS).splitlines()
    sample = f'mangohud_fps_current{{process_name="game",graphics_api="vulkan",pid="1234"}} 60.00 {TS}'
    idx = lines.index(sample)
    assert lines[idx - 2].startswith("# HELP mangohud_fps_current ")
    assert lines[idx - 1] == "# TYPE mangohud_fps_current gauge"


def test_families_in_fixed_order(snapshot):
    doc = render_metrics(snapshot, timestamp_ms=TS)
    types = re.findall(r"^# TYPE (\S+) gauge$", doc, re.MULTILINE)
    helps = re.findall(r"^# HELP (\S+) .+$", doc, re.MULTILINE)
    assert types == EXPECTED_NAMES
    assert helps == EXPECTED_NAMES
    assert [m.name for m in MetricDefinitions.all()] == EXPECTED_NAMES


def test_value_precision(snapshot):
    doc = render_metrics(snapshot, timestamp_ms=TS)
    values = {}
    for line in doc.splitlines():
        if line.startswith("#"):
            continue
        name = line.split("{", 1)[0]
        value, ts = line.rsplit(" ", 2)[1:]
        values[name] = value
        assert ts == str(TS)

    assert values["mangohud_fps_current"] == "60.00"
    assert values["mangohud_frametime_ms"] == "16.667"
    assert values["mangohud_cpu_load_percent"] == "23.4"
    assert values["mangohud_cpu_power_watts"] == "45.3"
    assert values["mangohud_cpu_frequency_mhz"] == "4200"
    assert values["mangohud_cpu_temperature_celsius"] == "65"
    assert values["mangohud_gpu_load_percent"] == "97.0"
    assert values["mangohud_gpu_temperature_celsius"] == "72"
    assert values["mangohud_gpu_core_clock_mhz"] == "2100"
    assert values["mangohud_gpu_memory_clock_mhz"] == "10000"
    assert values["mangohud_gpu_power_watts"] == "220.5"
    assert values["mangohud_gpu_vram_used_gb"] == "6.500"
    assert values["mangohud_ram_used_gb"] == "12.250"
    assert values["mangohud_swap_used_gb"] == "0.500"
    assert values["mangohud_process_rss_gb"] == "2.125"


def test_every_sample_shares_labels_and_timestamp(snapshot):
    doc = render_metrics(snapshot)
    samples = [line for line in doc.splitlines() if not line.startswith("#")]
    assert len(samples) == 15
    labels = {line[line.index("{"):line.index("}") + 1] for line in samples}
    timestamps = {line.rsplit(" ", 1)[1] for line in samples}
    assert len(labels) == 1
    assert len(timestamps) == 1
    assert doc.endswith("\n")


def test_labels_are_escaped():
    snapshot = MetricsSnapshot(process_name='my "game"\n', graphics_api="DX\\VK", process_pid=7)
    doc = render_metrics(snapshot, timestamp_ms=TS)
    assert 'process_name="my \\"game\\"\\n",graphics_api="DX\\\\VK",pid="7"' in doc


def test_default_snapshot_renders_zeros():
    doc = render_metrics(MetricsSnapshot(), timestamp_ms=TS)
    assert f'mangohud_fps_current{{process_name="",graphics_api="",pid="0"}} 0.00 {TS}' in doc
    assert f'mangohud_cpu_temperature_celsius{{process_name="",graphics_api="",pid="0"}} 0 {TS}' in doc
