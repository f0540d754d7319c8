"""End-to-end scans over fabricated hosts."""

from datetime import datetime

from siliconscan.config import RuleTables, ScanConfig
from siliconscan.engine import STAGES, run_scan
from siliconscan.findings import Severity
from siliconscan.scanner.static import StaticProbe

ARM = "Mach-O 64-bit executable arm64"
INTEL = "Mach-O 64-bit executable x86_64"


def _facts(**host):
    """A clean Apple Silicon host: no findings unless overridden."""
    h = dict(
        arm64_capable=True,
        current_arch="arm64",
        chip_model="Apple M2",
        os_version="13.4",
        emulation_layer_installed=True,
        system="Darwin 22.5.0 arm64",
    )
    h.update(host)
    return {
        "host": h,
        "path": ["/opt/homebrew/bin", "/usr/local/bin", "/usr/bin"],
        "developer_tools": "/Library/Developer/CommandLineTools",
    }


def test_clean_host_has_no_findings():
    result = run_scan(ScanConfig(), StaticProbe(_facts()))
    assert result.report.summary == (0, 0, 0)
    assert result.exit_code == 0
    assert result.exit_severity is None


def test_native_host_in_foreign_mode_is_critical():
    result = run_scan(ScanConfig(), StaticProbe(_facts(current_arch="foreign", os_version="12.2.1")))
    assert result.report.critical_count >= 1
    assert result.exit_code == 1


def test_old_os_is_exactly_one_critical():
    result = run_scan(ScanConfig(), StaticProbe(_facts(os_version="10.15.7")))
    critical = [f for f in result.log.findings if f.severity is Severity.CRITICAL]
    assert len(critical) == 1
    assert critical[0].stage == "architecture"


def test_outdated_toolchain_is_exactly_one_critical():
    tables = RuleTables(toolchain_tools=("buildtool",), toolchain_minimums={"buildtool": 12})
    facts = _facts()
    facts.update({
        "executables": {"buildtool": "/usr/local/bin/buildtool"},
        "binaries": {"/usr/local/bin/buildtool": INTEL},
        "versions": {"buildtool": "11"},
    })
    result = run_scan(ScanConfig(tables=tables), StaticProbe(facts))
    assert result.report.critical_count == 1
    assert result.exit_code == 1


def test_warnings_alone_exit_zero():
    facts = _facts(emulation_layer_installed=False)
    result = run_scan(ScanConfig(), StaticProbe(facts))
    assert result.report.summary[1] >= 1
    assert result.exit_code == 0


def test_scan_is_idempotent():
    facts = _facts(os_version="10.15")
    facts.update({
        "executables": {"node": "/usr/local/bin/node", "git": "/usr/local/bin/git"},
        "binaries": {"/usr/local/bin/node": INTEL, "/usr/local/bin/git": ARM},
        "processes": [{"pid": 99, "command": "/usr/local/bin/node", "arch": "x86_64"}],
    })
    first = run_scan(ScanConfig(), StaticProbe(facts))
    second = run_scan(ScanConfig(), StaticProbe(facts))
    assert first.log.findings == second.log.findings
    assert first.report.summary == second.report.summary


def test_sections_follow_stage_order():
    result = run_scan(ScanConfig(), StaticProbe(_facts()))
    assert [s.stage for s in result.report.sections] == [stage.STAGE_ID for stage in STAGES]
    assert [s.stage for s in result.report.sections] == [
        "architecture", "package_managers", "path", "processes", "containers", "toolchains",
    ]


def test_failing_stage_does_not_abort_scan():
    """A probe blowing up mid-stage loses that stage only; partial facts survive."""

    class BrokenProcesses(StaticProbe):
        def list_processes(self):
            raise RuntimeError("ps exploded")

    facts = _facts()
    facts["path"] = ["/usr/local/bin", "/opt/homebrew/bin"]
    result = run_scan(ScanConfig(), BrokenProcesses(facts))
    processes = next(s for s in result.report.sections if s.stage == "processes")
    assert [e.text for e in processes.entries] == ["Active Processes Under Rosetta"]
    # Later stages still ran, earlier findings still counted
    assert any(f.stage == "path" for f in result.log.findings)
    toolchains = next(s for s in result.report.sections if s.stage == "toolchains")
    assert toolchains.entries


def test_failing_host_inspection_degrades_to_intel_profile():
    class BrokenHost(StaticProbe):
        def host_arch_flag(self):
            raise OSError("sysctl missing")

    result = run_scan(ScanConfig(), BrokenHost(_facts()))
    assert result.report.host.is_native_arch_host is False
    assert result.report.host.current_arch == "unknown"


def test_test_mode_skips_enumeration():
    facts = _facts()
    facts["processes"] = [{"pid": 99, "command": "node", "arch": "x86_64"}]
    result = run_scan(ScanConfig(test_mode=True), StaticProbe(facts))
    assert result.report.summary == (0, 0, 0)
    processes = next(s for s in result.report.sections if s.stage == "processes")
    assert processes.entries[0].text.startswith("[TEST MODE]")


def test_report_timestamp_is_scan_start():
    before = datetime.now()
    result = run_scan(ScanConfig(), StaticProbe(_facts()))
    assert before <= result.report.generated_at <= datetime.now()
    assert result.report.system == "Darwin 22.5.0 arm64"


def test_missing_current_arch_is_not_critical():
    facts = _facts()
    del facts["host"]["current_arch"]
    result = run_scan(ScanConfig(), StaticProbe(facts))
    assert result.report.critical_count == 0
    assert result.exit_code == 0


def test_variant_platform_in_docker_config_warns():
    facts = _facts()
    facts.update({
        "executables": {"docker": "/opt/homebrew/bin/docker"},
        "binaries": {"/opt/homebrew/bin/docker": ARM},
        "docker": {"running": True, "arch": "aarch64", "config": {"defaultPlatform": "linux/amd64/v2"}},
    })
    result = run_scan(ScanConfig(), StaticProbe(facts))
    assert result.log.warning_count == 1
