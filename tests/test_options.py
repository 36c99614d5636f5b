"""
Template variable option tests

Tests extraction of --name=value / --name value variables from argv,
YAML variables files and the merged variable set.
"""

import datetime

import pytest

from sty2dtx.config import AppSettings
from sty2dtx.lib.options import (
    VariableError,
    fileBase_derive,
    variables_build,
    variables_extract,
    variablesFile_load,
)


KNOWN = {"--output", "--template", "--verbose", "--help"}


def settings_make(**overrides) -> AppSettings:
    """Settings isolated from the environment and any .env file"""
    defaults = dict(
        author="Default Author",
        email="default@example.org",
        maintainer="",
        version="v1.0",
        date="",
        description="",
        type="package",
    )
    defaults.update(overrides)
    return AppSettings(_env_file=None, **defaults)


class TestExtract:
    """Test splitting variables from the command line"""

    def test_equals_form(self):
        remaining, variables = variables_extract(["--author=Jane Doe", "a.sty"], KNOWN)

        assert remaining == ["a.sty"]
        assert variables == {"author": "Jane Doe"}

    def test_separate_value_form(self):
        remaining, variables = variables_extract(["--email", "j@d.org", "-v", "a.sty"], KNOWN)

        assert remaining == ["-v", "a.sty"]
        assert variables == {"email": "j@d.org"}

    def test_known_options_kept(self):
        argv = ["--output", "x.dtx", "--template=t.dtx", "--year", "2020"]
        remaining, variables = variables_extract(argv, KNOWN)

        assert remaining == ["--output", "x.dtx", "--template=t.dtx"]
        assert variables == {"year": "2020"}

    def test_value_starting_with_dashes(self):
        """The next argument is always taken as the value"""
        _, variables = variables_extract(["--description", "--odd--"], KNOWN)
        assert variables == {"description": "--odd--"}

    def test_empty_value(self):
        _, variables = variables_extract(["--description="], KNOWN)
        assert variables == {"description": ""}

    def test_double_dash_stops(self):
        """Nothing after -- is a variable"""
        remaining, variables = variables_extract(["--a=1", "--", "--b=2", "-"], KNOWN)

        assert remaining == ["--", "--b=2", "-"]
        assert variables == {"a": "1"}

    def test_stdin_marker_kept(self):
        remaining, variables = variables_extract(["-", "out.dtx"], KNOWN)
        assert remaining == ["-", "out.dtx"]
        assert variables == {}

    def test_missing_value(self):
        with pytest.raises(VariableError, match="--author"):
            variables_extract(["a.sty", "--author"], KNOWN)

    def test_later_value_wins(self):
        _, variables = variables_extract(["--year=2000", "--year", "2001"], KNOWN)
        assert variables == {"year": "2001"}


class TestVariablesFile:
    """Test YAML variables files"""

    def test_mapping(self, tmp_path):
        path = tmp_path / "vars.yaml"
        path.write_text("author: Jane Doe\nyear: 2021\ndescription:\n", encoding="utf-8")

        assert variablesFile_load(str(path)) == {
            "author": "Jane Doe",
            "year": "2021",
            "description": "",
        }

    def test_empty_file(self, tmp_path):
        path = tmp_path / "vars.yaml"
        path.write_text("", encoding="utf-8")
        assert variablesFile_load(str(path)) == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "vars.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(VariableError, match="mapping"):
            variablesFile_load(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "vars.yaml"
        path.write_text("author: [unclosed\n", encoding="utf-8")
        with pytest.raises(VariableError, match="parse"):
            variablesFile_load(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(VariableError, match="nope.yaml"):
            variablesFile_load(str(tmp_path / "nope.yaml"))


class TestBuild:
    """Test merging and derived variables"""

    TODAY = datetime.date(2024, 3, 5)

    def test_defaults(self):
        variables = variables_build({}, settings=settings_make(), today=self.TODAY)

        assert variables["author"] == "Default Author"
        assert variables["maintainer"] == "Default Author"
        assert variables["year"] == "2024"
        assert variables["type"] == "package"
        assert variables["ext"] == "sty"
        assert variables["Type"] == "Package"
        assert "date" not in variables

    def test_precedence(self):
        """Command line beats the variables file beats the settings"""
        variables = variables_build(
            {"author": "Cli"},
            {"author": "File", "email": "file@example.org"},
            settings=settings_make(),
            today=self.TODAY,
        )

        assert variables["author"] == "Cli"
        assert variables["email"] == "file@example.org"

    def test_explicit_maintainer(self):
        variables = variables_build(
            {"maintainer": "Someone Else"}, settings=settings_make(), today=self.TODAY
        )
        assert variables["maintainer"] == "Someone Else"

    def test_use_date(self):
        variables = variables_build({}, settings=settings_make(), use_date=True, today=self.TODAY)
        assert variables["date"] == "2024/03/05"

    def test_explicit_date_beats_use_date(self):
        variables = variables_build(
            {"date": "2000/01/01"}, settings=settings_make(), use_date=True, today=self.TODAY
        )
        assert variables["date"] == "2000/01/01"

    @pytest.mark.parametrize("value", ["class", "Class", "CLASS"])
    def test_class_type(self, value):
        variables = variables_build({"type": value}, settings=settings_make(), today=self.TODAY)

        assert variables["type"] == "class"
        assert variables["ext"] == "cls"
        assert variables["Type"] == "Class"

    def test_invalid_type(self):
        with pytest.raises(VariableError, match="module"):
            variables_build({"type": "module"}, settings=settings_make(), today=self.TODAY)

    def test_arbitrary_variables_passed_through(self):
        variables = variables_build({"license": "MIT"}, settings=settings_make(), today=self.TODAY)
        assert variables["license"] == "MIT"


class TestFileBase:
    """Test the <+file+> default"""

    def test_from_output(self):
        assert fileBase_derive(["in.sty"], "out/demo.dtx") == "demo"

    def test_from_input_when_stdout(self):
        assert fileBase_derive(["lib/mypkg.sty", "other.sty"], "-") == "mypkg"

    def test_unknown(self):
        assert fileBase_derive(["-"], "-") == "unknown"
        assert fileBase_derive([], None) == "unknown"
