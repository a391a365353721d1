"""Unit tests for ToolInstaller."""

import subprocess

from pwlab.core.confirm import AlwaysNo, AlwaysYes
from pwlab.infrastructure.installer import ToolInstaller


class FakeSystem:
    """PATH lookups and a package manager that 'installs' into PATH."""

    def __init__(self, on_path, returncode=0):
        self.on_path = set(on_path)
        self.returncode = returncode
        self.calls = []

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.on_path else None

    def run(self, argv, **kwargs):
        self.calls.append(list(argv))
        if self.returncode == 0:
            self.on_path.add(argv[-1])
        return subprocess.CompletedProcess(argv, self.returncode)


TOOLS = {"john": "john", "hashcat": "hashcat"}


def test_present_tools_are_left_alone():
    system = FakeSystem({"john", "hashcat", "brew"})
    caps, outcomes = ToolInstaller(AlwaysYes(), which=system.which, run=system.run).ensure(TOOLS)
    assert all(o.already_present for o in outcomes)
    assert system.calls == []
    assert caps.available == ["john", "hashcat"]


def test_installs_with_brew_first():
    system = FakeSystem({"brew", "apt-get"})
    caps, outcomes = ToolInstaller(AlwaysYes(), which=system.which, run=system.run).ensure(TOOLS)
    assert system.calls == [["brew", "update"], ["brew", "install", "john"], ["brew", "install", "hashcat"]]
    assert all(o.installed for o in outcomes)
    assert caps.is_available("john") and caps.is_available("hashcat")


def test_apt_get_fallback():
    system = FakeSystem({"apt-get", "john"})
    _, outcomes = ToolInstaller(AlwaysYes(), which=system.which, run=system.run).ensure(TOOLS)
    assert system.calls == [["sudo", "apt-get", "update"], ["sudo", "apt-get", "install", "-y", "hashcat"]]
    assert outcomes[1].installed


def test_declined_install_is_not_fatal():
    system = FakeSystem({"brew"})
    caps, outcomes = ToolInstaller(AlwaysNo(), which=system.which, run=system.run).ensure(TOOLS)
    assert system.calls == []
    assert all(o.declined for o in outcomes)
    assert caps.missing == ["john", "hashcat"]


def test_no_package_manager():
    system = FakeSystem(set())
    _, outcomes = ToolInstaller(AlwaysYes(), which=system.which, run=system.run).ensure(TOOLS, tools=["john"])
    assert len(outcomes) == 1
    assert "package manager" in outcomes[0].error


def test_failed_install_reported():
    system = FakeSystem({"brew"}, returncode=1)
    caps, outcomes = ToolInstaller(AlwaysYes(), which=system.which, run=system.run).ensure(TOOLS)
    assert "exited with status 1" in outcomes[0].error
    assert not caps.is_available("john")


def test_explicit_package_manager():
    system = FakeSystem({"brew", "apt-get"})
    installer = ToolInstaller(AlwaysYes(), package_manager="apt-get", which=system.which, run=system.run)
    assert installer.detect_package_manager() == "apt-get"
    assert installer.install_command("apt-get", "john") == ["sudo", "apt-get", "install", "-y", "john"]


def test_update_failure_does_not_block_install():
    system = FakeSystem({"brew"})
    calls = []

    def run(argv, **kwargs):
        calls.append(list(argv))
        if argv[-1] == "update":
            return subprocess.CompletedProcess(argv, 1)
        return system.run(argv, **kwargs)

    caps, outcomes = ToolInstaller(AlwaysYes(), which=system.which, run=run).ensure(TOOLS, tools=["john"])
    assert calls == [["brew", "update"], ["brew", "install", "john"]]
    assert outcomes[0].installed
    assert caps.is_available("john")


def test_no_update_when_nothing_is_installed():
    system = FakeSystem({"brew", "john"})
    ToolInstaller(AlwaysYes(), which=system.which, run=system.run).ensure(TOOLS, tools=["john"])
    declined = FakeSystem({"brew"})
    ToolInstaller(AlwaysNo(), which=declined.which, run=declined.run).ensure(TOOLS)
    assert system.calls == []
    assert declined.calls == []
