from lox.scanner import Scanner
from lox.tokens import Token, TokenType as T


def kinds(source):
    return [tok.kind for tok in Scanner(source).scan_tokens()]


def test_punctuation_and_operators():
    assert kinds("( ) { } , . - + ; * / ! != = == > >= < <=") == [
        T.LEFT_PAREN, T.RIGHT_PAREN, T.LEFT_BRACE, T.RIGHT_BRACE,
        T.COMMA, T.DOT, T.MINUS, T.PLUS, T.SEMICOLON, T.STAR, T.SLASH,
        T.BANG, T.BANG_EQUAL, T.EQUAL, T.EQUAL_EQUAL,
        T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL,
        T.EOF,
    ]


def test_two_char_operators_without_spaces():
    assert kinds("a<=b==!c") == [
        T.IDENTIFIER, T.LESS_EQUAL, T.IDENTIFIER, T.EQUAL_EQUAL, T.BANG, T.IDENTIFIER, T.EOF,
    ]


def test_keywords_and_identifiers():
    source = "and class else false for fun if nil or print return super this true var while let loop break continue"
    assert kinds(source) == [
        T.AND, T.CLASS, T.ELSE, T.FALSE, T.FOR, T.FUN, T.IF, T.NIL, T.OR, T.PRINT,
        T.RETURN, T.SUPER, T.THIS, T.TRUE, T.VAR, T.WHILE, T.LET, T.LOOP, T.BREAK,
        T.CONTINUE, T.EOF,
    ]
    assert kinds("orchid _x x1 classy") == [T.IDENTIFIER] * 4 + [T.EOF]


def test_literals():
    tokens = Scanner('12 3.25 4. "hi" true nil').scan_tokens()
    assert [tok.literal for tok in tokens[:3]] == [12.0, 3.25, 4.0]
    assert tokens[3].kind is T.DOT
    assert tokens[4].literal == "hi"
    assert tokens[5].literal is True
    assert tokens[6].literal is None


def test_string_spanning_lines_keeps_positions():
    tokens = Scanner('x = "ab\ncd" y').scan_tokens()
    string, after = tokens[2], tokens[3]
    assert string.literal == "ab\ncd"
    assert (string.line, string.column) == (1, 5)
    assert (after.lexeme, after.line, after.column) == ("y", 2, 5)


def test_comments_are_skipped():
    tokens = Scanner("// hello\n/* a\nb */ print").scan_tokens()
    assert [tok.kind for tok in tokens] == [T.PRINT, T.EOF]
    assert tokens[0].line == 3


def test_eof_is_positioned_at_end_of_input():
    eof = Scanner("a\nbc").scan_tokens()[-1]
    assert (eof.kind, eof.line, eof.column) == (T.EOF, 2, 3)


def test_unterminated_string():
    scanner = Scanner('print "abc')
    assert [tok.kind for tok in scanner.scan_tokens()] == [T.PRINT, T.EOF]
    [error] = scanner.diagnostics
    assert error.message == "Unterminated string."
    assert (error.line, error.column) == (1, 7)


def test_unterminated_block_comment():
    scanner = Scanner("1 /* never closed")
    assert [tok.kind for tok in scanner.scan_tokens()] == [T.NUMBER, T.EOF]
    assert [e.message for e in scanner.diagnostics] == ["Unterminated block comment."]


def test_scanning_continues_after_invalid_characters():
    scanner = Scanner("1 @ 2 # 3")
    tokens = scanner.scan_tokens()
    assert [tok.kind for tok in tokens] == [T.NUMBER, T.NUMBER, T.NUMBER, T.EOF]
    assert [tok.column for tok in tokens[:3]] == [1, 5, 9]
    assert [(e.message, e.column) for e in scanner.diagnostics] == [
        ("Unexpected character '@'.", 3),
        ("Unexpected character '#'.", 7),
    ]


def test_token_equality_ignores_position():
    assert Token(T.IDENTIFIER, "a", None, 1, 1) == Token(T.IDENTIFIER, "a", None, 5, 9)
    assert Token(T.IDENTIFIER, "a", None, 1, 1).where() == "at 'a'"
    assert Token(T.EOF, "", None, 1, 1).where() == "at end"
