import hashlib
from pathlib import Path

from click.testing import CliRunner

from pwlab.cli import cli


def _config(tmp_path: Path, body: str = "") -> Path:
    cfg = tmp_path / "pwlab.yml"
    cfg.write_text(body or "{}", encoding="utf-8")
    return cfg


def _invoke(args, tmp_path: Path, body: str = ""):
    runner = CliRunner()
    cfg = _config(tmp_path, body)
    return runner.invoke(cli, [*args, "-c", str(cfg)], prog_name="pwlab")


def test_version_command():
    runner = CliRunner()
    result = runner.invoke(cli, ["version"], prog_name="pwlab")
    assert result.exit_code == 0
    assert "pwlab" in result.stdout


def test_generate_writes_lab_files(tmp_path):
    lab = tmp_path / "lab"
    result = _invoke(["generate", "--workdir", str(lab), "--assume-no"], tmp_path)
    assert result.exit_code == 0, result.stdout
    assert (lab / "passwords.txt").read_text(encoding="utf-8").splitlines()[0] == "password123"
    md5 = (lab / "md5_hashes.txt").read_text(encoding="utf-8").splitlines()
    assert md5[0] == hashlib.md5(b"password123").hexdigest()
    assert len((lab / "sha512crypt_hashes.txt").read_text(encoding="utf-8").splitlines()) == 10
    assert (lab / "small_wordlist.txt").exists()
    assert "10 passwords" in result.stdout


def test_generate_with_corpus(tmp_path):
    lab = tmp_path / "lab"
    corpus = tmp_path / "mine.txt"
    corpus.write_text("alpha\n\nbeta\n", encoding="utf-8")
    result = _invoke(["generate", "--corpus", str(corpus), "-w", str(lab), "-n"], tmp_path)
    assert result.exit_code == 0, result.stdout
    assert (lab / "sha256_hashes.txt").read_text(encoding="utf-8").splitlines() == [
        hashlib.sha256(b"alpha").hexdigest(),
        hashlib.sha256(b"beta").hexdigest(),
    ]


def test_generate_missing_corpus_fails(tmp_path):
    lab = tmp_path / "lab"
    result = _invoke(["generate", "--corpus", str(tmp_path / "nope.txt"), "-w", str(lab), "-n"], tmp_path)
    assert result.exit_code == 1
    assert "cannot read corpus" in result.stdout
    assert not (lab / "md5_hashes.txt").exists()


def test_generate_keeps_existing_files(tmp_path):
    lab = tmp_path / "lab"
    lab.mkdir()
    (lab / "md5_hashes.txt").write_text("stale\n", encoding="utf-8")
    result = _invoke(["generate", "-w", str(lab), "-n"], tmp_path)
    assert result.exit_code == 0
    assert (lab / "md5_hashes.txt").read_text(encoding="utf-8") == "stale\n"

    result = _invoke(["generate", "-w", str(lab), "-n", "--overwrite", "overwrite"], tmp_path)
    assert result.exit_code == 0
    assert len((lab / "md5_hashes.txt").read_text(encoding="utf-8").splitlines()) == 10


def test_yes_and_no_conflict(tmp_path):
    result = _invoke(["generate", "-w", str(tmp_path / "lab"), "-y", "-n"], tmp_path)
    assert result.exit_code == 2


def test_missing_config_fails(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["generate", "-c", str(tmp_path / "absent.yml")], prog_name="pwlab")
    assert result.exit_code == 1
    assert "Config not found" in result.stdout


def test_invalid_config_fails(tmp_path):
    result = _invoke(["commands", "-w", str(tmp_path / "lab")], tmp_path, "hashing:\n  salt_length: 99\n")
    assert result.exit_code == 1
    assert "Config validation failed" in result.stdout


def test_commands_prints_recommended_commands(tmp_path):
    lab = tmp_path / "lab"
    result = _invoke(["commands", "-w", str(lab)], tmp_path)
    assert result.exit_code == 0
    assert "--format=raw-md5" in result.stdout
    assert "--format=sha512crypt" in result.stdout
    assert "--rules" in result.stdout
    assert "-m 1400" in result.stdout
    assert "?l?l?l?l?l?l?d?d" in result.stdout
    assert not lab.exists()


def test_crack_headless_runs_nothing(tmp_path):
    lab = tmp_path / "lab"
    assert _invoke(["generate", "-w", str(lab), "-n"], tmp_path).exit_code == 0
    before = {p.name: p.read_bytes() for p in lab.iterdir()}

    result = _invoke(["crack", "-w", str(lab), "-n"], tmp_path)
    assert result.exit_code == 0
    assert "jobs: 0 completed" in result.stdout
    assert {p.name: p.read_bytes() for p in lab.iterdir()} == before


def test_worksheet(tmp_path):
    result = _invoke(["worksheet", "-w", str(tmp_path / "lab")], tmp_path)
    assert result.exit_code == 0
    assert "PASSWORD CRACKING LAB WORKSHEET" in result.stdout
    assert "sha512crypt_hashes.txt" in result.stdout
    assert "Exercise 3: Salted hashes" in result.stdout


def test_lab_without_install_or_crack(tmp_path):
    lab = tmp_path / "lab"
    result = _invoke(["lab", "-w", str(lab), "-n", "--skip-install", "--no-crack"], tmp_path)
    assert result.exit_code == 0, result.stdout
    assert (lab / "sha256_hashes.txt").exists()
    assert "Recommended commands" in result.stdout
    assert "LAB WORKSHEET" in result.stdout


def test_config_which_prefers_cli(tmp_path):
    cfg = _config(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["config-which", "-c", str(cfg)], prog_name="pwlab")
    assert result.exit_code == 0
    assert cfg.name in result.stdout


def _flat(output: str) -> str:
    return " ".join(output.split())


def test_generate_with_corpus_refused_over_kept_lab(tmp_path):
    lab = tmp_path / "lab"
    assert _invoke(["generate", "-w", str(lab), "-n"], tmp_path).exit_code == 0
    sha_before = (lab / "sha256_hashes.txt").read_bytes()
    corpus = tmp_path / "mine.txt"
    corpus.write_text("alpha\nbeta\n", encoding="utf-8")

    result = _invoke(["generate", "--corpus", str(corpus), "-w", str(lab), "-n"], tmp_path)
    assert result.exit_code == 1
    assert "may not be overwritten" in _flat(result.stdout)
    assert (lab / "passwords.txt").read_text(encoding="utf-8").splitlines()[0] == "password123"
    assert (lab / "sha256_hashes.txt").read_bytes() == sha_before


def test_doctor_lists_wordlists(tmp_path):
    lab = tmp_path / "lab"
    lab.mkdir()
    (lab / "rockyou.txt").write_text("password\n123456\n", encoding="utf-8")
    result = _invoke(["doctor", "-w", str(lab)], tmp_path)
    assert result.exit_code == 0, result.stdout
    assert "Cracking tools" in result.stdout
    assert "Wordlists" in result.stdout
    assert "rockyou" in result.stdout


def test_unwritable_log_file_fails(tmp_path):
    blocker = tmp_path / "lab"
    blocker.write_text("not a dir", encoding="utf-8")
    result = _invoke(["commands", "-w", str(blocker)], tmp_path, "logging:\n  file_name: lab.log\n")
    assert result.exit_code == 1
    assert "Cannot open log file" in result.stdout
