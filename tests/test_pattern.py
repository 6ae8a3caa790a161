import datetime
import unittest

from logpattern import PatternMismatch, PatternSyntaxError, compile_pattern


class TestPattern(unittest.TestCase):

    def test_process_line(self):
        p = compile_pattern("%t %n[%p]: %m")
        line = "2023-05-01 10:22:31 sshd[1234]: Accepted password"
        e = p.match(line)
        assert e.process == "sshd"
        assert e.pid == 1234
        assert e.message == "Accepted password"
        assert e.when == datetime.datetime(2023, 5, 1, 10, 22, 31,
                                           tzinfo=datetime.timezone.utc)
        assert e.line == line

    def test_deterministic(self):
        pattern = "%t(%b %d %H:%M:%S) %h(%h) %n: %m"
        line = "Sep 12 11:22:33 host doraemon: restart"
        e1 = compile_pattern(pattern).match(line)
        e2 = compile_pattern(pattern).match(line)
        assert e1 == e2
        assert e1.host == "host"

    def test_host(self):
        e = compile_pattern("%h(%4:%p)").match("192.168.1.10:22")
        assert e.host == "192.168.1.10:22"
        e = compile_pattern("%h").match("mail.example.org")
        assert e.host == "mail.example.org"
        # a missing hostname does not fall back to an empty address
        assert compile_pattern("%h(%h) %m").parse(" message") is None

    def test_level(self):
        p = compile_pattern("[%l(INFO, WARNING)] %m")
        assert p.match("[INFO] started").level == "INFO"
        assert p.match("[WARNING] slow").level == "WARNING"
        with self.assertRaises(PatternMismatch):
            p.match("[DEBUG] noisy")
        # levels are case sensitive
        with self.assertRaises(PatternMismatch):
            p.match("[info] started")

        for pattern in ("[%l] %m", "[%l(-)] %m", "[%l()] %m"):
            assert compile_pattern(pattern).match("[DEBUG] x").level == "DEBUG"

    def test_user_group(self):
        e = compile_pattern("%u:%g %m").match("root:wheel login")
        assert (e.user, e.group, e.message) == ("root", "wheel", "login")

    def test_blank(self):
        p = compile_pattern("%n%b%m")
        assert p.match("cron \t  job done").message == "job done"
        assert p.match("cron").message == ""

    def test_words(self):
        p = compile_pattern("%w %w %w")
        e = p.match('GET "/index.html HTTP/1.1" \'quoted word\'')
        assert e.words == ["GET", "/index.html HTTP/1.1", "quoted word"]
        with self.assertRaises(PatternMismatch):
            p.match('GET "/index.html HTTP/1.1')

    def test_empty_word(self):
        e = compile_pattern('%w%m').match('"" rest')
        assert e.words == []
        assert e.message == " rest"

    def test_discard(self):
        e = compile_pattern("%*[%p]").match("anything here [42]")
        assert e.pid == 42
        e = compile_pattern("%n %*").match("sshd whatever follows")
        assert e.process == "sshd"
        e = compile_pattern("%*\\(%p\\)").match("id (7)")
        assert e.pid == 7

    def test_escape(self):
        e = compile_pattern("\\@\\*\\|\\\\%n").match("@*|\\cron")
        assert e.process == "cron"
        e = compile_pattern("100%% %n").match("100% cron")
        assert e.process == "cron"

    def test_alternation(self):
        p = compile_pattern("@(%h(%4)|%h(%f))")
        e = p.match("example.com")
        assert e.host == "example.com"
        e = p.match("192.0.2.1")
        assert e.host == "192.0.2.1:0"

    def test_alternation_rewind(self):
        # the first branch consumes "abcde" then fails,
        # the second one starts from the same position
        p = compile_pattern("@(abcdeX|%n)")
        assert p.match("abcdef").process == "abcdef"

    def test_alternation_restore(self):
        # words extracted by a failed branch are dropped
        p = compile_pattern("@(%w %w!|%w)%m")
        e = p.match("one two three")
        assert e.words == ["one"]
        assert e.message == " two three"

    def test_alternation_order(self):
        p = compile_pattern("@(%n|%p)")
        # first matching branch wins, even if the second one would match
        e = p.match("123")
        assert e.process == "123"
        assert e.pid == 0

    def test_alternation_optional(self):
        p = compile_pattern("%n@([%p]|): %m")
        assert p.match("sshd[12]: up").pid == 12
        e = p.match("kernel: up")
        assert e.process == "kernel"
        assert e.pid == 0

    def test_alternation_nested(self):
        p = compile_pattern("@(<@(%p|x)>|%m)")
        assert p.match("<12>").pid == 12
        assert p.match("<x>").pid == 0
        assert p.match("<y>").message == "<y>"

    def test_alternation_failure(self):
        p = compile_pattern("a@(b|c)")
        with self.assertRaises(PatternMismatch):
            p.match("ad")

    def test_parse(self):
        p = compile_pattern("%n[%p]")
        assert p.parse("sshd[1]").pid == 1
        assert p.parse("sshd(1)") is None

    def test_argument(self):
        p = compile_pattern("%t(%y/%m/%d) %m")
        e = p.match("2020/01/02 hello")
        assert e.when.date() == datetime.date(2020, 1, 2)

    def test_syntax(self):
        invalid_patterns = [
            "",
            "%x",
            "%n%",
            "%t(" + "%y" * 33 + ")",
            "%t(%y",
            "%t(%q)",
            "%h(%4:%z)",
            "@%n",
            "@(%n|%p",
            "@()",
            "\\n",
            "abc\\",
        ]
        for pattern in invalid_patterns:
            with self.assertRaises(PatternSyntaxError, msg=pattern):
                compile_pattern(pattern)

    def test_argument_length(self):
        # 64 characters are accepted
        compile_pattern("%l(" + "A" * 64 + ")")
        with self.assertRaises(PatternSyntaxError):
            compile_pattern("%l(" + "A" * 65 + ")")
