# scopedstyles

Scoped CSS for component-based web code.

Every selector in a block of CSS gets a class appended, so the styles only
apply to elements that carry that class. The class name is handed back so
it can be put on a component's markup.

```python
from scopedstyles.macros import style_test

style_test("div .one p { color: blue; }")
# 'div.test .one.test p.test{color: blue;}'
```

`style_test` uses the fixed class `test`; the other entry points use a
generated name of the form `l-` followed by six digits.

## What it handles

- element, class, id, universal (`*`) and attribute selectors
- combinators `,`, `>`, `+`, `~` and the namespace separator `|`
- pseudo-classes and pseudo-elements (`:hover`, `::before`, `:nth-child(2)`, `:not(...)`)
- `:root`, which is left unscoped
- `:deep(...)`, whose contents are passed through without the scope class,
  for reaching into child components
- regular at-rules (`@charset`, `@import`, `@namespace`, `@layer a, b;`)
- nested at-rules (`@media`, `@supports`, `@layer`, `@document`), with the
  style rules inside them scoped
- at-rules whose bodies are not selectors (`@page`, `@font-face`,
  `@keyframes`, `@counter-style`, `@font-feature-values`, `@property`),
  copied through
- in inline CSS, `raw_str(...)` keeps the double quotes of a string value,
  which are otherwise removed

For inline CSS, property names are checked against a list of known CSS and
SVG properties; an unknown name, or a declaration missing its semicolon,
raises `scopedstyles.declaration.PropertyError` (its `suggestion` attribute
holds the closest known name). Custom properties (`--name`) and `-webkit-`
prefixes are accepted. Stylesheet text read from a file is not checked this
way.

## Installation

```
pip install scopedstyles
```

## Using it from Python

The functions in `scopedstyles.macros` take CSS text or a path to a `.css`
file.

```python
from scopedstyles.macros import style, style_str, style_sheet, style_sheet_str

# A class name derived from the content (from its count of non-whitespace
# characters), so the same CSS always gives the same name.
class_name = style("button { color: green; }")

# A fresh random class name together with the scoped CSS.
class_name, css = style_str("""
    button { background-color: green; }
    button:hover { background-color: yellow; }
""")

# The same for a stylesheet on disk.
class_name = style_sheet("./src/hello.css")
class_name, css = style_sheet_str("./src/button.css")
```

`style_test(css)` and `style_sheet_test(path)` scope with the fixed class
`test`, which is handy for checking output.

Inline CSS is split into tokens first; a string or bracket that is not
closed raises `scopedstyles.tokens.TokenizeError`. Stylesheet text with an
unclosed comment or block raises `scopedstyles.text.CssSyntaxError`.

The lower-level pieces are available too:

- `scopedstyles.scope.Scope` — the class name (`Scope.random()`,
  `Scope.from_seed(content)`, `name()`, `selector()`)
- `scopedstyles.rules.build_style_from_tokens(tokens, scope)` — scoped CSS
  and the set of selector parts, from a token list or CSS text
- `scopedstyles.text.build_style_from_str(text, scope)` — scoped CSS from
  plain stylesheet text
- `scopedstyles.rules.scope_selector(selector_text, scope)` — scope a single
  selector

## Collating styles into one file

`style` and `style_sheet` only return a class name; the CSS itself can be
gathered ahead of time. The build step searches every `.rs` file under a
directory for `let` statements directly inside top-level `fn` bodies whose
value is a `style!{...}` or `style_sheet!("path")` invocation, scopes each
one with the class that `style` or `style_sheet` would return for it, and
writes all of it, in order, to a single CSS file. Paths given to
`style_sheet!` are read relative to the working directory.

From the command line:

```
scopedstyles-build
```

Options:

- `--output PATH` — file to write the CSS to (default `./target/stylers_out.css`)
- `--search-dir DIR` — directory searched for `.rs` files (default `./src`)
- `-v`, `--verbose` — show debug output

The output directory and file are created when they do not exist. On error
the command prints a message and exits with status 1.

From Python:

```python
from scopedstyles.build import BuildParams, build, collect_styles

params = (
    BuildParams.builder()
    .with_output_path("./target/stylers_out.css")
    .with_search_dir("./src")
    .finish()
)
css = build(params)  # also returns the CSS it wrote

# Or scan a single source text:
parts = collect_styles(source_text)
```

`finish()` fills in the defaults under the working directory for any path
not given. `with_search_dir` raises `BuildError` when the directory does not
exist, and `with_output_path` raises it when the output file cannot be
created.

## What it does not do

It produces class names and CSS text only. It does not render markup, attach
classes to elements or insert `<style>` elements; that is left to the code
that uses it. The build step recognises style invocations only in the form
described above.

## Running the tests

```
pip install -e ".[test]"
pytest
```