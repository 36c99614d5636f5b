"""
Header matcher tests

Tests recognition of macro and environment definition headers at the
start of a line, and the captured name/rest fields.
"""

import pytest

from sty2dtx.lib.matchers import (
    environmentHeader_match,
    header_match,
    macroHeader_match,
    userName_is,
)
from sty2dtx.models.regions import (
    BraceBalance,
    DefinitionKind,
    EnvironmentHeader,
    MacroHeader,
)


class TestTexDefinitions:
    """Test \\def style headers"""

    def test_plain_def(self):
        """\\def with a one-line body"""
        header = macroHeader_match("\\def\\foo{bar}")

        assert header is not None
        assert header.prefix == ""
        assert header.kind is DefinitionKind.TEX_DEF
        assert header.name == "foo"
        assert header.rest == "{bar}"
        assert header.balance == BraceBalance(opened=1, closed=1)

    @pytest.mark.parametrize("definer", ["gdef", "edef", "xdef"])
    def test_def_variants(self, definer):
        """\\gdef, \\edef and \\xdef are TeX definitions too"""
        header = macroHeader_match(f"\\{definer}\\foo{{}}")

        assert header is not None
        assert header.kind is DefinitionKind.TEX_DEF
        assert header.name == "foo"

    def test_whitespace_between_def_and_name(self):
        """Whitespace after \\def is allowed"""
        header = macroHeader_match("\\def \\foo{}")

        assert header is not None
        assert header.name == "foo"

    def test_prefixes_captured(self):
        """\\global, \\long, \\protected, \\outer prefixes in any order"""
        header = macroHeader_match("\\long\\global \\protected\\def\\foo#1{")

        assert header is not None
        assert header.prefix == "\\long\\global \\protected"
        assert header.name == "foo"
        assert header.rest == "#1{"
        assert not header.balance.is_balanced

    def test_name_with_at_and_colon(self):
        """Internal names may contain @ and :"""
        header = macroHeader_match("\\def\\my@internal:nn{}")

        assert header is not None
        assert header.name == "my@internal:nn"

    def test_terminator_not_in_rest(self):
        """The line terminator is not part of the rest"""
        header = macroHeader_match("\\def\\foo{bar}\n")

        assert header is not None
        assert header.rest == "{bar}"


class TestLatexDefinitions:
    """Test \\newcommand style headers"""

    def test_newcommand_braced(self):
        """\\newcommand{\\foo}: the closing brace of the name is dropped"""
        header = macroHeader_match("\\newcommand{\\foo}{bar}")

        assert header is not None
        assert header.kind is DefinitionKind.NEW_COMMAND
        assert header.opens_brace
        assert header.name == "foo"
        assert header.rest == "{bar}"
        assert header.balance.is_balanced

    def test_newcommand_unbraced(self):
        """\\newcommand\\foo has no brace to compensate"""
        header = macroHeader_match("\\newcommand\\foo[1]{#1}")

        assert header is not None
        assert not header.opens_brace
        assert header.rest == "[1]{#1}"

    def test_starred_forms(self):
        """\\renewcommand* and \\providecommand* are recognized"""
        renew = macroHeader_match("\\renewcommand*{\\foo}{x}")
        provide = macroHeader_match("\\providecommand*\\bar{y}")

        assert renew is not None and renew.kind is DefinitionKind.RENEW_COMMAND
        assert renew.opens_brace
        assert provide is not None and provide.kind is DefinitionKind.PROVIDE_COMMAND
        assert provide.name == "bar"

    def test_extra_closing_brace_stripped(self):
        """One leftover '}' after a braced name is stripped from the rest"""
        header = macroHeader_match("\\newcommand{\\foo}}{x}")

        assert header is not None
        assert header.rest == "{x}"

    def test_unbraced_form_keeps_leading_brace(self):
        """Without an opening brace in the command no extra brace is stripped"""
        header = macroHeader_match("\\def\\foo}}{x}")

        assert header is not None
        assert header.rest == "}{x}"

    def test_namedef(self):
        """\\@namedef{foo} names the macro without a backslash"""
        header = macroHeader_match("\\@namedef{foo}{bar}")

        assert header is not None
        assert header.kind is DefinitionKind.NAMEDEF
        assert header.opens_brace
        assert header.name == "foo"
        assert header.rest == "{bar}"


class TestMacroNonMatches:
    """Lines that must not be taken as macro headers"""

    @pytest.mark.parametrize(
        "line",
        [
            "  \\def\\foo{bar}",
            "\t\\newcommand{\\foo}{bar}",
            "x \\def\\foo{}",
            "\\defaults",
            "\\let\\foo\\relax",
            "% \\def\\foo{}",
            "",
        ],
    )
    def test_no_match(self, line):
        assert macroHeader_match(line) is None


class TestEnvironmentHeaders:
    """Test \\newenvironment style headers"""

    def test_newenvironment_one_line(self):
        """Both environment arguments on the header line"""
        header = environmentHeader_match("\\newenvironment{foo}{\\begin{center}}{\\end{center}}")

        assert header is not None
        assert header.kind is DefinitionKind.NEW_ENVIRONMENT
        assert header.name == "foo"
        assert header.rest == "{\\begin{center}}{\\end{center}}"
        assert header.balance == BraceBalance(opened=4, closed=4)

    def test_whitespace_around_name(self):
        """Whitespace around the braced name is allowed"""
        header = environmentHeader_match("\\renewenvironment { bar } {")

        assert header is not None
        assert header.kind is DefinitionKind.RENEW_ENVIRONMENT
        assert header.name == "bar"
        assert header.rest == " {"

    def test_provideenvironment(self):
        header = environmentHeader_match("\\provideenvironment{my@env}{}{}")

        assert header is not None
        assert header.kind is DefinitionKind.PROVIDE_ENVIRONMENT
        assert header.name == "my@env"

    @pytest.mark.parametrize(
        "line",
        [
            "\\newenvironment{foo",
            "\\newenvironment foo",
            " \\newenvironment{foo}{}{}",
            "text \\newenvironment{foo}{}{}",
        ],
    )
    def test_no_match(self, line):
        assert environmentHeader_match(line) is None


class TestHeaderMatch:
    """Test combined classification"""

    def test_macro(self):
        assert isinstance(header_match("\\def\\foo{}"), MacroHeader)

    def test_environment(self):
        assert isinstance(header_match("\\newenvironment{foo}{}{}"), EnvironmentHeader)

    def test_plain_code(self):
        assert header_match("\\RequirePackage{xcolor}") is None


class TestUserNames:
    """Test the letters-only name check"""

    @pytest.mark.parametrize("name", ["foo", "Foo", "FOO", "fooBar"])
    def test_user_names(self, name):
        assert userName_is(name)

    @pytest.mark.parametrize("name", ["fo@o", "@foo", "foo:n", "__foo"])
    def test_internal_names(self, name):
        assert not userName_is(name)
