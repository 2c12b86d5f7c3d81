from pathlib import Path

import pytest

from scopedstyles.build import (
    BuildError,
    BuildParams,
    BuildParamsBuilder,
    build,
    collect_styles,
    main,
)
from scopedstyles.declaration import PropertyError
from scopedstyles.macros import style, style_sheet

INLINE_CSS = """
        div {
            color: red;
        }
"""

INLINE_SOURCE = """
use stylers::style;

#[component]
pub fn Hello(name: &'static str) -> impl IntoView {
    let class_name = style! {
        div {
            color: red;
        }
    };
    view! { class = class_name, <div/> }
}
"""

IGNORED_SOURCE = """
struct S;
impl S {
    fn method(&self) {
        let a = style! { div { color: red; } };
    }
}
fn f(x: Option<u8>) {
    if let Some(v) = x { }
    let b = mystyle! { div { color: red; } };
    let c = style! { div { color: red; } }.to_string();
    style! { div { color: red; } };
}
"""

SHEET_CSS = ".two{\n    color: yellow;\n}\n"


def _sheet_source(css_path: Path) -> str:
    return f'fn f() {{ let c = style_sheet!("{css_path}"); }}'


def test_collect_inline_style():
    name = style(INLINE_CSS)
    assert collect_styles(INLINE_SOURCE) == [f"div.{name}{{color: red;}}"]


def test_scope_name_shape():
    (css,) = collect_styles(INLINE_SOURCE)
    name = css[len("div."):css.index("{")]
    assert name.startswith("l-")
    assert len(name) == 8


def test_collect_style_sheet(tmp_path):
    css_path = tmp_path / "hello.css"
    css_path.write_text(SHEET_CSS, encoding="utf-8")
    name = style_sheet(css_path)
    assert collect_styles(_sheet_source(css_path)) == [f".two.{name}{{color: yellow;}}"]


def test_ignored_forms():
    assert collect_styles(IGNORED_SOURCE) == []


def test_typed_let_and_qualified_path():
    source = """
    fn f() {
        let a: &str = style! { div { color: red; } };
        let b = stylers::style! { div { color: red; } };
    }
    """
    styles = collect_styles(source)
    assert len(styles) == 2
    assert styles[0] == styles[1]
    assert styles[0].startswith("div.l-")


def test_unbalanced_source_raises():
    with pytest.raises(BuildError):
        collect_styles("fn f() { let x = style!{ div { color: red; } ; }")


def test_missing_style_sheet_raises(tmp_path):
    with pytest.raises(BuildError):
        collect_styles(_sheet_source(tmp_path / "missing.css"))


def test_unknown_property_raises():
    with pytest.raises(PropertyError) as info:
        collect_styles("fn f() { let x = style! { div { colr: red; } }; }")
    assert info.value.suggestion == "color"


def test_with_output_path_creates_file_and_dirs(tmp_path):
    out = tmp_path / "a" / "b" / "out.css"
    builder = BuildParamsBuilder().with_output_path(out)
    assert builder.output_path == out
    assert out.is_file()


def test_with_output_path_keeps_existing_file(tmp_path):
    out = tmp_path / "out.css"
    out.write_text("kept", encoding="utf-8")
    BuildParams.builder().with_output_path(out)
    assert out.read_text(encoding="utf-8") == "kept"


def test_with_output_path_on_directory_raises(tmp_path):
    with pytest.raises(BuildError):
        BuildParamsBuilder().with_output_path(tmp_path)


def test_with_search_dir_requires_directory(tmp_path):
    not_dir = tmp_path / "file.rs"
    not_dir.write_text("", encoding="utf-8")
    with pytest.raises(BuildError):
        BuildParamsBuilder().with_search_dir(not_dir)
    with pytest.raises(BuildError):
        BuildParamsBuilder().with_search_dir(tmp_path / "absent")


def test_finish_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "src").mkdir()
    params = BuildParams.builder().finish()
    assert params.output_path == Path.cwd() / "target" / "stylers_out.css"
    assert params.search_dir == Path.cwd() / "src"
    assert params.output_path.is_file()


def test_finish_without_default_search_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(BuildError, match="default search dir"):
        BuildParams.builder().finish()


def test_finish_keeps_given_paths(tmp_path):
    out = tmp_path / "out.css"
    params = (
        BuildParams.builder().with_output_path(out).with_search_dir(tmp_path).finish()
    )
    assert params == BuildParams(output_path=out, search_dir=tmp_path)


def test_build_writes_collected_css(tmp_path):
    src = tmp_path / "src"
    (src / "sub").mkdir(parents=True)
    css_path = tmp_path / "hello.css"
    css_path.write_text(SHEET_CSS, encoding="utf-8")
    sheet_source = _sheet_source(css_path)
    (src / "a.rs").write_text(INLINE_SOURCE, encoding="utf-8")
    (src / "sub" / "b.rs").write_text(sheet_source, encoding="utf-8")
    (src / "notes.txt").write_text(INLINE_SOURCE, encoding="utf-8")
    (src / "dir.rs").mkdir()

    out = tmp_path / "target" / "out.css"
    params = BuildParams.builder().with_output_path(out).with_search_dir(src).finish()
    css = build(params)

    expected = "".join(collect_styles(INLINE_SOURCE) + collect_styles(sheet_source))
    assert css == expected
    assert out.read_text(encoding="utf-8") == expected


def test_build_overwrites_output(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    out = tmp_path / "out.css"
    out.write_text("old content", encoding="utf-8")
    params = BuildParams.builder().with_output_path(out).with_search_dir(src).finish()
    assert build(params) == ""
    assert out.read_text(encoding="utf-8") == ""


def test_build_reports_bad_file(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "bad.rs").write_text("fn f() {", encoding="utf-8")
    params = (
        BuildParams.builder()
        .with_output_path(tmp_path / "out.css")
        .with_search_dir(src)
        .finish()
    )
    with pytest.raises(BuildError, match="bad.rs"):
        build(params)


def test_main_builds(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "x.rs").write_text(INLINE_SOURCE, encoding="utf-8")
    assert main(["--output", "out/s.css", "--search-dir", "src"]) == 0
    written = (tmp_path / "out" / "s.css").read_text(encoding="utf-8")
    assert written == "".join(collect_styles(INLINE_SOURCE))


def test_main_fails_without_search_dir(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["--search-dir", "nowhere"]) == 1
    assert "nowhere" in capsys.readouterr().err