import unittest

from tests import _bootstrap  # noqa: F401
from texpand.arguments import read_argument, read_name, skip_space
from texpand.diag import MissingArgumentError, UnbalancedBracesError


class ReadArgumentTests(unittest.TestCase):
    def test_simple_argument(self) -> None:
        self.assertEqual(read_argument("{abc}rest", 0), ("abc", 5))

    def test_empty_argument(self) -> None:
        self.assertEqual(read_argument("{}", 0), ("", 2))

    def test_argument_at_offset(self) -> None:
        self.assertEqual(read_argument("xx{y}z", 2), ("y", 5))

    def test_nested_braces_are_kept(self) -> None:
        self.assertEqual(read_argument("{a{b{c}}d}e", 0), ("a{b{c}}d", 10))

    def test_escaped_braces_keep_backslash(self) -> None:
        self.assertEqual(read_argument(r"{\{}", 0), (r"\{", 4))
        self.assertEqual(read_argument(r"{a\}b}", 0), (r"a\}b", 6))

    def test_escaped_backslash_does_not_escape_brace(self) -> None:
        self.assertEqual(read_argument(r"{a\\}b}", 0), ("a\\\\", 5))

    def test_argument_is_not_expanded(self) -> None:
        self.assertEqual(read_argument(r"{\A{x}#%}", 0), (r"\A{x}#%", 9))

    def test_leading_space_is_skipped_only_on_request(self) -> None:
        self.assertEqual(read_argument(" \n\t{v}", 0, skip_leading_space=True), ("v", 6))
        with self.assertRaises(MissingArgumentError):
            read_argument(" {v}", 0)

    def test_missing_open_brace(self) -> None:
        with self.assertRaises(MissingArgumentError):
            read_argument("abc", 0)
        with self.assertRaisesRegex(MissingArgumentError, "end of input"):
            read_argument("", 0)

    def test_unbalanced_braces(self) -> None:
        with self.assertRaises(UnbalancedBracesError):
            read_argument("{a{b}", 0)
        with self.assertRaises(UnbalancedBracesError):
            read_argument(r"{a\}", 0)
        with self.assertRaises(UnbalancedBracesError):
            read_argument("{a\\", 0)


class ScanHelperTests(unittest.TestCase):
    def test_read_name(self) -> None:
        self.assertEqual(read_name("abc9{x}", 0), ("abc9", 4))
        self.assertEqual(read_name("\\x-y", 1), ("x", 2))
        self.assertEqual(read_name("-", 0), ("", 0))

    def test_skip_space(self) -> None:
        self.assertEqual(skip_space("a  \n b", 1), 5)
        self.assertEqual(skip_space("ab", 1), 1)
        self.assertEqual(skip_space("a", 1), 1)


if __name__ == "__main__":
    unittest.main()
