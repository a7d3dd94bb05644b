from sql_indent.document import Document
from sql_indent.lexer import SqlLexicalClassifier, classifier_scope, scan
from sql_indent.models import LexicalContext, ScanState


def test_scan_counts_parentheses_in_code_only():
    assert scan("select f((1), 2").depth == 1
    assert scan("select '((' , \"(\", `(` from t").depth == 0
    assert scan("select 1 -- (((\n").depth == 0
    assert scan("select 1 # (((\n").depth == 0
    assert scan("select /* ( */ (").depth == 1


def test_scan_unmatched_closing_parenthesis_goes_negative():
    assert scan("))").depth == -2


def test_scan_unterminated_literals_stay_open():
    state = scan("select 'abc")
    assert state.context is LexicalContext.STRING
    assert state.quote == "'"

    assert scan("/* open").context is LexicalContext.BLOCK_COMMENT
    assert scan("-- open").context is LexicalContext.LINE_COMMENT


def test_scan_line_comment_ends_at_newline():
    assert scan("-- note\n").context is LexicalContext.CODE


def test_scan_doubled_quotes_and_escapes():
    assert scan("'it''s'").context is LexicalContext.CODE
    assert scan("'it\\'s'").context is LexicalContext.CODE
    assert scan("'it\\'s'", backslash_escapes=False).context is LexicalContext.STRING


def test_scan_backquotes_take_no_escapes():
    assert scan("`a\\` (").depth == 1


def test_scan_resumes_from_state():
    state = scan("select 'a", ScanState())
    resumed = scan("b' (", state)

    assert resumed.context is LexicalContext.CODE
    assert resumed.depth == 1


def test_classifier_reports_strings_and_comments():
    document = Document("select 'abc' -- note\n/* block\nstill */ x")
    classifier = SqlLexicalClassifier(document)

    assert classifier.is_string_or_comment(0) is False
    assert classifier.is_string_or_comment(9) is True
    assert classifier.is_string_or_comment(12) is False
    assert classifier.is_string_or_comment(16) is True
    assert classifier.is_string_or_comment(document.line_start(2)) is True
    assert classifier.is_string_or_comment(len(document) - 1) is False


def test_classifier_paren_depth_delta_between_lines():
    document = Document("select f(a,\n  ')',\n  b)\nfrom t")
    classifier = SqlLexicalClassifier(document)

    assert classifier.paren_depth_delta(0, document.line_start(1)) == 1
    assert classifier.paren_depth_delta(document.line_start(1), document.line_start(2)) == 0
    assert classifier.paren_depth_delta(document.line_start(2), document.line_start(3)) == -1
    assert classifier.paren_depth_delta(0, len(document)) == 0


def test_classifier_flushes_cached_states_on_edit():
    document = Document("select 1\nfrom t\nwhere (x)")
    classifier = SqlLexicalClassifier(document)
    where_start = document.line_start(2)

    assert classifier.is_string_or_comment(where_start) is False

    document.insert(0, "'")

    assert classifier.is_string_or_comment(document.line_start(2)) is True


def test_classifier_stops_following_edits_after_close():
    document = Document("select 1\nfrom t")

    with SqlLexicalClassifier(document) as classifier:
        classifier.state_at(len(document))

    document.insert(0, "'")
    assert classifier.is_string_or_comment(len(document)) is False


def test_classifier_scope_keeps_supplied_classifier():
    document = Document("select 1")
    classifier = SqlLexicalClassifier(document)

    with classifier_scope(document, classifier=classifier) as scoped:
        assert scoped is classifier

    with classifier_scope(document) as created:
        assert isinstance(created, SqlLexicalClassifier)
