from nutracker.render import agenda, column_widths, invalid_statuses, join_sections, list_domains, make_table, meeting


def test_make_table():
    out = make_table(["id", "title"], [["1", "First"], ["22", "Second"]], width=80)
    lines = out.splitlines()
    assert lines[0].split() == ["ID", "TITLE"]
    assert lines[1].split() == ["1", "First"]
    assert lines[2].split() == ["22", "Second"]


def test_make_table_columns_aligned():
    lines = make_table(["id", "title"], [["1", "First"], ["22", "Second"]], width=80).splitlines()
    assert lines[1].index("First") == lines[2].index("Second") == lines[0].index("TITLE")


def test_make_table_max_width_truncates():
    name = "averyveryverylongassigneename"
    out = make_table(["id", "assignees"], [["1", name]], max_widths={1: 15}, width=200)
    assert name not in out
    assert "…" in out


def test_make_table_no_trailing_whitespace():
    out = make_table(["a", "b"], [["x", ""]], width=80)
    assert all(line == line.rstrip() for line in out.splitlines())


def test_list_domains():
    assert list_domains("Groups", ["css", "apa", "css"]) == "Groups: apa, css"
    assert list_domains("Groups", []) == ""


def test_invalid_statuses():
    assert invalid_statuses([]) == ""
    out = invalid_statuses([["7", "Broken", "T N"]], width=80)
    assert out.startswith("Requests with invalid statuses due to conflicting labels:\n\n")
    assert "INVALID STATUS" in out
    assert "Broken" in out


def test_meeting():
    out = meeting([("First", ["https://example.org/1"]), ("Second", [])])
    assert out == (
        "gb, off\n"
        "\n"
        "subtopic: First\n"
        "https://example.org/1\n"
        "\n"
        "subtopic: Second\n"
        "\n"
        "gb, on"
    )


def test_agenda():
    assert agenda([("First", "https://example.org/1")]) == "* [First](https://example.org/1)"


def test_join_sections_skips_empty():
    assert join_sections("a", "", "b") == "a\n\nb"


def test_make_table_shrinks_only_title():
    title = "Review the thing " * 6
    out = make_table(["due", "id", "title", "status"], [["2027-05-23", "1234", title, "T N"]], width=80)
    lines = out.splitlines()
    assert lines[0].split()[:2] == ["DUE", "ID"]
    assert lines[0].split()[-1] == "STATUS"
    assert "2027-05-23" in lines[1]
    assert "1234" in lines[1]
    assert lines[1].endswith("T N")
    assert "…" in lines[1]
    assert all(len(line) <= 80 for line in lines)


def test_column_widths():
    rows = [["1", "A long title here", "x"]]
    assert column_widths(["id", "title", "group"], rows) == [2, 17, 5]
    assert column_widths(["id", "title", "group"], rows, width=20) == [2, 10, 5]
    assert column_widths(["id", "title", "group"], rows, max_widths={1: 8}) == [2, 8, 5]


def test_column_widths_never_shrink_fixed_columns():
    rows = [["2027-05-23", "w3c/media-accessibility-reqs#12"]]
    assert column_widths(["due", "locator"], rows, width=20) == [10, 31]
