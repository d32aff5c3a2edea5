"""Tests for git URL, subpath and escaping checks."""

import re
from xml.sax.saxutils import unescape

import pytest

from skillcrate.validation import (
    ErrorKind,
    SkillValidationError,
    escape_regexp,
    escape_xml,
    validate_git_url,
    validate_skill_subpath,
)


def _kind_of(func, value: str) -> ErrorKind:
    with pytest.raises(SkillValidationError) as exc_info:
        func(value)
    return exc_info.value.kind


class TestValidateGitUrl:
    """Tests for validate_git_url."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/user/repo",
            "https://github.com/user/repo.git",
            "https://gitlab.com/group/project",
            "http://github.com/user/repo",
            "git://github.com/user/repo.git",
            "ssh://git@github.com/user/repo.git",
            "git@github.com:user/repo.git",
            "git@gitlab.com:group/project.git",
        ],
    )
    def test_valid_urls(self, url: str) -> None:
        """Test that well formed URLs with allowed protocols pass."""
        assert validate_git_url(url) == url

    @pytest.mark.parametrize("char", list("`$(){};&|<>\\"))
    def test_dangerous_characters(self, char: str) -> None:
        """Test that every shell metacharacter is rejected in an https URL."""
        url = f"https://evil.com/repo{char}whoami"
        assert _kind_of(validate_git_url, url) is ErrorKind.COMMAND_INJECTION

    @pytest.mark.parametrize(
        "url",
        [
            "https://evil.com/repo`whoami`",
            "https://evil.com/repo$(whoami)",
            "https://evil.com/repo${USER}",
            'https://evil.com/repo" && rm -rf / #',
            "https://evil.com/repo;whoami",
            "https://evil.com/repo\\n",
        ],
    )
    def test_command_injection_payloads(self, url: str) -> None:
        """Test realistic injection payloads."""
        with pytest.raises(SkillValidationError, match="command injection"):
            validate_git_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "file:///etc/passwd",
            "ftp://evil.com/repo",
            "data:text/html,<script>alert(1)</script>",
            "javascript:alert(1)",
        ],
    )
    def test_invalid_protocols(self, url: str) -> None:
        """Test that protocols outside the allow-list are rejected first."""
        assert _kind_of(validate_git_url, url) is ErrorKind.INVALID_PROTOCOL

    @pytest.mark.parametrize(
        "url",
        [
            "git@github.com repo.git",
            "git@",
            "git@github.com:user/repo;rm",
            "git@github.com:user/$(id)",
        ],
    )
    def test_malformed_ssh(self, url: str) -> None:
        """Test that broken SSH shorthands are rejected."""
        assert _kind_of(validate_git_url, url) is ErrorKind.MALFORMED_SSH

    @pytest.mark.parametrize(
        "url",
        ["not-a-url", "://missing-protocol", "https://", "--upload-pack=touch"],
    )
    def test_malformed_url(self, url: str) -> None:
        """Test that strings which are not URLs are rejected."""
        assert _kind_of(validate_git_url, url) is ErrorKind.MALFORMED_URL

    def test_non_url_with_metacharacters(self) -> None:
        """Test that metacharacters are reported even when no URL parses."""
        kind = _kind_of(validate_git_url, "repo;rm -rf ~")
        assert kind is ErrorKind.COMMAND_INJECTION


class TestEscapeRegExp:
    """Tests for escape_regexp."""

    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("test.file", r"test\.file"),
            ("test*", r"test\*"),
            ("test+", r"test\+"),
            ("test?", r"test\?"),
            ("test^", r"test\^"),
            ("test$", r"test\$"),
            ("test[0-9]", r"test\[0-9\]"),
            ("test{1,3}", r"test\{1,3\}"),
            ("test(group)", r"test\(group\)"),
            ("test|other", r"test\|other"),
            ("test\\path", r"test\\path"),
        ],
    )
    def test_escapes_metacharacters(self, raw: str, escaped: str) -> None:
        """Test that each metacharacter gets a backslash."""
        assert escape_regexp(raw) == escaped

    def test_matches_literally(self) -> None:
        """Test that the escaped pattern only matches the literal text."""
        raw = "name.*|description.+"
        pattern = re.compile(escape_regexp(raw))

        assert pattern.search(f"prefix {raw} suffix")
        assert not pattern.search("nameXYZ|descriptionABC")
        assert not pattern.search("description")

    def test_leaves_plain_text(self) -> None:
        """Test that non-metacharacters are left alone."""
        assert escape_regexp("my-skill name") == "my-skill name"


class TestEscapeXml:
    """Tests for escape_xml."""

    def test_script_tag(self) -> None:
        """Test the classic script payload."""
        escaped = escape_xml("<script>alert(1)</script>")
        assert escaped == "&lt;script&gt;alert(1)&lt;/script&gt;"

    def test_ampersand_not_double_encoded(self) -> None:
        """Test that & is escaped once."""
        assert escape_xml("&") == "&amp;"
        assert escape_xml("Tom & Jerry") == "Tom &amp; Jerry"
        assert escape_xml("&&&") == "&amp;&amp;&amp;"

    def test_quotes(self) -> None:
        """Test both quote styles."""
        assert escape_xml('"quoted"') == "&quot;quoted&quot;"
        assert escape_xml("'quoted'") == "&apos;quoted&apos;"

    def test_all_special_characters(self) -> None:
        """Test every special character at once."""
        assert escape_xml("& < > \" '") == "&amp; &lt; &gt; &quot; &apos;"

    def test_injection_attempt(self) -> None:
        """Test that closing tags cannot be injected."""
        escaped = escape_xml("</name><evil>injected</evil><name>")
        assert escaped == "&lt;/name&gt;&lt;evil&gt;injected&lt;/evil&gt;&lt;name&gt;"
        assert "<evil>" not in escaped

    def test_round_trip(self) -> None:
        """Test that unescaping gives back the input."""
        raw = "a & b < c > d \" e ' f &amp;"
        entities = {"&quot;": '"', "&apos;": "'"}
        assert unescape(escape_xml(raw), entities) == raw


class TestValidateSkillSubpath:
    """Tests for validate_skill_subpath."""

    @pytest.mark.parametrize(
        ("raw", "normalized"),
        [
            ("skills/pdf", "skills/pdf"),
            ("document-skills/pdf", "document-skills/pdf"),
            ("coding_skills/terminal", "coding_skills/terminal"),
            ("skills//pdf", "skills/pdf"),
            ("skills///pdf", "skills/pdf"),
            ("skills/my.skill", "skills/my.skill"),
            ("skills/v1.2.3", "skills/v1.2.3"),
            ("skills/pdf/", "skills/pdf"),
            ("a/b/c/d/e/f/skill", "a/b/c/d/e/f/skill"),
            ("", ""),
        ],
    )
    def test_valid(self, raw: str, normalized: str) -> None:
        """Test accepted subpaths and their normalized form."""
        assert validate_skill_subpath(raw) == normalized

    @pytest.mark.parametrize(
        ("raw", "kind"),
        [
            ("../etc/passwd", ErrorKind.PATH_TRAVERSAL),
            ("skills/../../../etc/passwd", ErrorKind.PATH_TRAVERSAL),
            ("skills/..", ErrorKind.PATH_TRAVERSAL),
            ("/etc/passwd", ErrorKind.ABSOLUTE_PATH),
            ("//etc/passwd", ErrorKind.ABSOLUTE_PATH),
            ("./skills", ErrorKind.HIDDEN_PATH),
            (".hidden/skill", ErrorKind.HIDDEN_PATH),
            ("skills\0/evil", ErrorKind.INVALID_CHARACTERS),
            ("skills;rm -rf /", ErrorKind.INVALID_CHARACTERS),
            ("skills|whoami", ErrorKind.INVALID_CHARACTERS),
            ("skills&evil", ErrorKind.INVALID_CHARACTERS),
            ("skills`whoami`", ErrorKind.INVALID_CHARACTERS),
            ("skills$(whoami)", ErrorKind.INVALID_CHARACTERS),
            ("skills/pdf\n", ErrorKind.INVALID_CHARACTERS),
            ("skills\\pdf", ErrorKind.INVALID_CHARACTERS),
        ],
    )
    def test_rejected(self, raw: str, kind: ErrorKind) -> None:
        """Test rejected subpaths and the reported kind."""
        assert _kind_of(validate_skill_subpath, raw) is kind

    def test_checks_run_before_normalization(self) -> None:
        """Test that slash collapsing cannot hide a rejected prefix."""
        assert _kind_of(validate_skill_subpath, "///") is ErrorKind.ABSOLUTE_PATH
        kind = _kind_of(validate_skill_subpath, "skills/.//..")
        assert kind is ErrorKind.PATH_TRAVERSAL

    def test_error_message(self) -> None:
        """Test the message reported for a traversal."""
        with pytest.raises(SkillValidationError, match=r"path traversal detected"):
            validate_skill_subpath("../x")
