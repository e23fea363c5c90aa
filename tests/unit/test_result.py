import pytest

from app.models.schemas import Ecad, Format
from domains.component_library.exceptions import SaveError
from domains.component_library.result import FetchResult


def make_result(output_path, files):
    return FetchResult(
        format=Format(ecad=Ecad.KICAD, output_path=output_path.parent),
        output_path=output_path,
        files=files,
    )


def test_save_creates_directories_and_writes_files(tmp_path):
    target = tmp_path / "kicad" / "LM358DR"
    result = make_result(target, {
        "LM358DR.lib": b"symbols",
        "LibraryLoader.pretty/SOIC8.kicad_mod": b"footprint",
    })

    assert result.save() == target
    assert (target / "LM358DR.lib").read_bytes() == b"symbols"
    assert (target / "LibraryLoader.pretty" / "SOIC8.kicad_mod").read_bytes() == b"footprint"


def test_save_overwrites_existing_files(tmp_path):
    (tmp_path / "Bar.zip").write_bytes(b"old")

    make_result(tmp_path, {"Bar.zip": b"new"}).save()

    assert (tmp_path / "Bar.zip").read_bytes() == b"new"


def test_save_failure_is_save_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a directory should be")

    with pytest.raises(SaveError):
        make_result(blocker / "LM358DR", {"x.lib": b"x"}).save()


def test_save_refuses_paths_outside_output(tmp_path):
    with pytest.raises(SaveError, match="outside"):
        make_result(tmp_path / "out", {"../escape.lib": b"x"}).save()

    assert not (tmp_path / "escape.lib").exists()
