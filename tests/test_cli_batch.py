"""
批量上传命令行工具测试
"""
import textwrap

import pytest

from upload_util.cli.batch import EXIT_CONFIG_ERROR, EXIT_FAILED, EXIT_OK, find_files, format_file_size, main


@pytest.fixture
def source_dir(tmp_path):
    src = tmp_path / "src"
    (src / "nested").mkdir(parents=True)
    (src / "a.jpg").write_bytes(b"a" * 10)
    (src / "b.png").write_bytes(b"b" * 20)
    (src / "notes.txt").write_bytes(b"n" * 5)
    (src / "nested" / "c.jpg").write_bytes(b"c" * 30)
    return src


def write_local_config(tmp_path, extensions="[]"):
    dest = tmp_path / "dest"
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(f"""
        upload:
          type: local
          local:
            path: {dest}
        upload-settings:
          filename-strategy: original
          allowed-extensions: {extensions}
    """), encoding="utf-8")
    return path, dest


def test_format_file_size():
    assert format_file_size(0) == "0 bytes"
    assert format_file_size(1023) == "1023 bytes"
    assert format_file_size(1024) == "1.00 KB"
    assert format_file_size(1536 * 1024) == "1.50 MB"
    assert format_file_size(3 * 1024 ** 3) == "3.00 GB"


def test_find_files_flat(source_dir):
    files = find_files(str(source_dir), "*.jpg")
    assert [p.rsplit("/", 1)[-1] for p in files] == ["a.jpg"]


def test_find_files_recursive(source_dir):
    files = find_files(str(source_dir), "*.jpg", recursive=True)
    assert sorted(p.rsplit("/", 1)[-1] for p in files) == ["a.jpg", "c.jpg"]


def test_find_files_all(source_dir):
    assert len(find_files(str(source_dir))) == 3
    assert len(find_files(str(source_dir), recursive=True)) == 4


def test_dry_run_uploads_nothing(tmp_path, source_dir):
    config_path, dest = write_local_config(tmp_path)
    code = main(["--config", str(config_path), "--dir", str(source_dir), "--dry-run"])
    assert code == EXIT_OK
    assert not dest.exists()


def test_batch_upload(tmp_path, source_dir):
    config_path, dest = write_local_config(tmp_path)
    code = main(["--config", str(config_path), "--dir", str(source_dir), "-r", "-c", "2"])
    assert code == EXIT_OK
    assert sorted(p.name for p in dest.iterdir()) == ["a.jpg", "b.png", "c.jpg", "notes.txt"]


def test_failed_file_sets_exit_code(tmp_path, source_dir):
    config_path, dest = write_local_config(tmp_path, extensions='[".jpg"]')
    code = main(["--config", str(config_path), "--dir", str(source_dir)])
    assert code == EXIT_FAILED
    assert sorted(p.name for p in dest.iterdir()) == ["a.jpg"]


def test_config_error(tmp_path, source_dir):
    code = main(["--config", str(tmp_path / "missing.yaml"), "--dir", str(source_dir)])
    assert code == EXIT_CONFIG_ERROR


def test_no_matching_files(tmp_path, source_dir):
    config_path, _ = write_local_config(tmp_path)
    assert main(["--config", str(config_path), "--dir", str(source_dir), "--pattern", "*.mp4"]) == EXIT_OK


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert "Upload Util" in capsys.readouterr().out
