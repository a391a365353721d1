"""Integration tests: generate -> plan -> crack with fake tools."""

import hashlib
import subprocess
from pathlib import Path

import pytest

from pwlab.apps.lab import LabPipeline, render_worksheet
from pwlab.config import LabConfig
from pwlab.core.capability import ToolCapabilities
from pwlab.core.confirm import AlwaysNo, AlwaysYes
from pwlab.core.errors import ArtifactWriteError, CorpusReadError
from pwlab.domain.models import ArtifactKind, AttackKind, HashAlgorithm, OverwritePolicy
from pwlab.infrastructure.cracking import InvocationStatus
from pwlab.infrastructure.hashing import verify_salted


class FakeTools:
    """PATH with john + hashcat whose every run succeeds."""

    def __init__(self, on_path=("john", "hashcat")):
        self.on_path = set(on_path)
        self.calls = []

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.on_path else None

    def run(self, argv, **kwargs):
        self.calls.append(list(argv))
        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")


@pytest.fixture
def config(tmp_path: Path) -> LabConfig:
    return LabConfig(workdir=tmp_path / "password_lab")


def test_full_lab_run(config):
    tools = FakeTools()
    pipeline = LabPipeline(config, AlwaysYes(), run=tools.run, which=tools.which)

    run = pipeline.run()

    assert all(o.already_present for o in run.install)
    assert len(run.corpus) == 10
    assert [r.status for r in run.results] == [InvocationStatus.COMPLETED] * 4
    assert [c[0] for c in tools.calls] == ["/usr/bin/john"] * 3 + ["/usr/bin/hashcat"]
    assert run.to_dict()["entries"] == 10

    salted = (config.workdir / "sha512crypt_hashes.txt").read_text(encoding="utf-8").splitlines()
    for line, plain in zip(salted, run.corpus, strict=True):
        assert verify_salted(plain, line.split(":", 1)[1])


def test_generation_happens_before_any_tool(config):
    order = []

    def run(argv, **kwargs):
        order.append(("run", (config.workdir / "md5_hashes.txt").exists()))
        return subprocess.CompletedProcess(argv, 0)

    tools = FakeTools()
    pipeline = LabPipeline(config, AlwaysYes(), run=run, which=tools.which)
    pipeline.run(install=False)
    assert order and all(existed for _, existed in order)


def test_missing_tools_only_skip_their_steps(config):
    tools = FakeTools(on_path=("john",))
    pipeline = LabPipeline(config, AlwaysYes(), run=tools.run, which=tools.which)
    pipeline.generate()

    results = pipeline.crack()
    by_tool = {}
    for r in results:
        by_tool.setdefault(r.invocation.tool, []).append(r.status)
    assert by_tool["john"] == [InvocationStatus.COMPLETED] * 3
    assert by_tool["hashcat"] == [InvocationStatus.SKIPPED]


def test_headless_declines_everything(config):
    tools = FakeTools()
    pipeline = LabPipeline(config, AlwaysNo(), run=tools.run, which=tools.which)
    run = pipeline.run(install=False)
    assert {r.status for r in run.results} == {InvocationStatus.DECLINED}
    assert tools.calls == []


def test_filters_and_full_plan(config):
    tools = FakeTools()
    pipeline = LabPipeline(config, AlwaysYes(), run=tools.run, which=tools.which)
    pipeline.generate()

    masks = pipeline.crack(attacks=[AttackKind.MASK])
    assert len(masks) == 1
    assert masks[0].invocation.tool == "hashcat"

    salted = pipeline.crack(algorithms=[HashAlgorithm.SHA512CRYPT])
    assert [r.invocation.attack for r in salted] == [AttackKind.BATCH]

    everything = pipeline.crack(full=True)
    assert len(everything) == 6

    assert pipeline.crack(tools=["hashcat"], algorithms=[HashAlgorithm.MD5]) == []


def test_kept_corpus_drives_hash_files(config):
    config.workdir.mkdir(parents=True)
    (config.workdir / "passwords.txt").write_text("onlyone\n", encoding="utf-8")

    pipeline = LabPipeline(config, AlwaysNo(), capabilities=ToolCapabilities.none())
    run = pipeline.generate()

    assert run.corpus.entries == ("onlyone",)
    assert (config.workdir / "md5_hashes.txt").read_text(encoding="utf-8") == (
        hashlib.md5(b"onlyone").hexdigest() + "\n"
    )


def test_overwrite_replaces_corpus(config, tmp_path):
    config.workdir.mkdir(parents=True)
    (config.workdir / "passwords.txt").write_text("old\n", encoding="utf-8")
    source = tmp_path / "new.txt"
    source.write_text("new\n", encoding="utf-8")

    pipeline = LabPipeline(config, AlwaysNo(), overwrite=OverwritePolicy.OVERWRITE)
    pipeline.generate(source)

    assert (config.workdir / "passwords.txt").read_text(encoding="utf-8") == "new\n"


def test_bad_corpus_writes_nothing(config, tmp_path):
    pipeline = LabPipeline(config, AlwaysYes(), capabilities=ToolCapabilities.none())
    with pytest.raises(CorpusReadError):
        pipeline.generate(tmp_path / "missing.txt")
    assert pipeline.store.existing() == []


def test_recommended_and_worksheet(config):
    pipeline = LabPipeline(config, AlwaysNo(), capabilities=ToolCapabilities.none())
    commands = [inv.command for inv in pipeline.recommended()]
    assert any("--rules" in c for c in commands)
    assert any(c.startswith("hashcat -m 1400 -a 3") for c in commands)

    sheet = render_worksheet(pipeline.store)
    assert str(config.workdir) in sheet
    assert "Exercise 1: Dictionary attack with John" in sheet


def test_configured_wordlist(config, tmp_path):
    rockyou = tmp_path / "rockyou.txt"
    rockyou.write_text("letmein\n", encoding="utf-8")
    cfg = config.model_copy(update={"tools": config.tools.model_copy(update={"wordlist": str(rockyou)})})

    pipeline = LabPipeline(cfg, AlwaysNo(), capabilities=ToolCapabilities.none())
    first = pipeline.recommended(tools=["john"])[0]
    assert f"--wordlist={rockyou}" in first.argv


def test_new_corpus_refused_when_old_one_is_kept(config, tmp_path):
    pipeline = LabPipeline(config, AlwaysNo(), capabilities=ToolCapabilities.none())
    pipeline.generate()
    (config.workdir / "md5_hashes.txt").unlink()
    sha256_before = (config.workdir / "sha256_hashes.txt").read_bytes()

    mine = tmp_path / "mine.txt"
    mine.write_text("alpha\nbeta\n", encoding="utf-8")
    again = LabPipeline(config, AlwaysNo(), capabilities=ToolCapabilities.none())
    with pytest.raises(ArtifactWriteError) as exc:
        again.generate(mine)

    assert exc.value.path == config.workdir / "passwords.txt"
    assert "may not be overwritten" in str(exc.value)
    assert not (config.workdir / "md5_hashes.txt").exists()
    assert (config.workdir / "sha256_hashes.txt").read_bytes() == sha256_before


def test_new_corpus_refused_when_overwrite_declined(config, tmp_path):
    config.workdir.mkdir(parents=True)
    (config.workdir / "passwords.txt").write_text("old\n", encoding="utf-8")
    mine = tmp_path / "mine.txt"
    mine.write_text("alpha\n", encoding="utf-8")

    pipeline = LabPipeline(config, AlwaysNo(), overwrite=OverwritePolicy.ASK)
    with pytest.raises(ArtifactWriteError):
        pipeline.generate(mine)
    assert pipeline.store.existing() == [ArtifactKind.CORPUS]


def test_stats_reported_with_run(config):
    tools = FakeTools(on_path=("john",))
    pipeline = LabPipeline(config, AlwaysYes(), run=tools.run, which=tools.which)
    run = pipeline.run(install=False)

    stats = run.to_dict()["stats"]
    assert stats["invocations_total"] == 4
    assert stats["completed"] == 3
    assert stats["skipped"] == 1
    assert run.stats.summary().startswith("4 jobs: 3 completed")


def test_wordlists_found_in_lab_directory(config):
    config.workdir.mkdir(parents=True)
    (config.workdir / "rockyou.txt").write_text("letmein\nqwerty\n", encoding="utf-8")

    pipeline = LabPipeline(config, AlwaysNo(), capabilities=ToolCapabilities.none())
    found = {wl.name: wl for wl in pipeline.wordlists()}
    assert found["rockyou"].path == config.workdir / "rockyou.txt"
    assert found["rockyou"].word_count == 2
