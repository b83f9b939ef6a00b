"""
Tests for id and code generation.
"""

from surveydoc.identity import generate_id, generate_unique_code


class TestGenerateId:

    def test_format(self):
        item_id = generate_id()
        prefix, millis, suffix = item_id.split("_")
        assert prefix == "item"
        assert millis.isdigit()
        assert len(suffix) == 9

    def test_ids_differ(self):
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000


class TestGenerateUniqueCode:

    def test_empty_document(self):
        assert generate_unique_code([]) == "Q1"

    def test_skips_taken_codes(self):
        assert generate_unique_code(["Q1", "Q2"]) == "Q3"

    def test_fills_smallest_gap(self):
        assert generate_unique_code(["Q1", "Q3", "Q4"]) == "Q2"

    def test_custom_prefix(self):
        assert generate_unique_code(["R1", "Q2"], "R") == "R2"

    def test_result_never_taken(self):
        existing = {f"Q{n}" for n in range(1, 50) if n % 7}
        code = generate_unique_code(existing)
        assert code not in existing
        assert code == "Q7"

    def test_accepts_any_iterable(self):
        assert generate_unique_code(code for code in ("Q1",)) == "Q2"
