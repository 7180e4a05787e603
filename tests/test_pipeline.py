from datetime import datetime

import pytest

from pagesim.errors import InsufficientDocuments, SourceUnavailable
from pagesim.output import CleanedOutput
from pagesim.pipeline import fingerprint_document, run, run_documents
from pagesim.sources import Document, load_documents, read_document


OTHER = """<html><body><article>
Quarterly revenue grew eleven percent while operating margins narrowed,
according to the filing submitted by the logistics company on Tuesday.
Analysts expect shipping volumes to recover during the second half.
</article></body></html>
"""

VOLCANOES = (
    "Volcanic eruptions release ash sulfur dioxide and lava flows which reshape islands "
    "over centuries while geologists monitor tremors seismographs and gas emissions closely\n"
)

MARATHONS = (
    "Marathon runners train weekly mileage intervals tempo runs hydration strategy "
    "carbohydrate loading taper recovery shoes cadence\n"
)


def test_identical_documents(write_page, page):
    a = write_page("a.html", page)
    b = write_page("b.html", page)
    report = run([a, b])
    assert len(report.pairs) == 1
    r = report.pairs[0].result
    assert r.distance == 0
    assert f"{r.similarity_percent:.2f}" == "100.00"
    assert r.relationship == "Identical"


def test_only_stripped_regions_differ(write_page, page):
    a = write_page("a.html", page)
    b = write_page("b.html", page.replace("Home About Contact", "Shop Blog Careers Login"))
    report = run([a, b])
    assert report.documents[0].fingerprint == report.documents[1].fingerprint
    assert report.pairs[0].result.relationship == "Identical"


def test_different_bodies_sharing_markup(write_page, page):
    report = run([write_page("a.html", page), write_page("b.html", OTHER)])
    r = report.pairs[0].result
    assert r.distance > 10
    assert r.similarity_percent < 85.0
    assert r.relationship not in {"Identical", "Near duplicates", "Minor variants"}


def test_unrelated_bodies(write_page):
    a = write_page("a.txt", VOLCANOES)
    b = write_page("b.txt", MARATHONS)
    r = run([a, b]).pairs[0].result
    assert r.relationship in {"Unrelated", "Maximally different"}
    assert r.similarity_percent < 60.0


def test_missing_document_dropped(write_page, page, tmp_path):
    a = write_page("a.html", page)
    b = write_page("b.html", OTHER)
    missing = tmp_path / "nope.html"
    report = run([a, missing, b])
    assert [d.label for d in report.documents] == [str(a), str(b)]
    assert len(report.failures) == 1
    assert report.failures[0][0] == str(missing)
    assert len(report.pairs) == 1


def test_insufficient_documents(write_page, page, tmp_path):
    a = write_page("a.html", page)
    with pytest.raises(InsufficientDocuments) as exc:
        run([a, tmp_path / "missing.html"])
    assert exc.value.available == 1
    assert len(exc.value.failures) == 1


def test_no_documents():
    with pytest.raises(InsufficientDocuments):
        run_documents([])


def test_all_pairs_in_order(write_page, page):
    paths = [write_page(f"{i}.html", page if i != 1 else OTHER) for i in range(3)]
    report = run(paths)
    assert [(p.left, p.right) for p in report.pairs] == [(0, 1), (0, 2), (1, 2)]
    assert report.pairs[1].result.distance == 0


def test_workers_match_sequential(write_page, page):
    paths = [write_page(f"{i}.html", page if i % 2 else OTHER) for i in range(4)]
    seq = run(paths)
    par = run(paths, workers=3)
    assert [d.fingerprint for d in seq.documents] == [d.fingerprint for d in par.documents]


def test_script_only_document_is_zero():
    fd = fingerprint_document(Document("s", b"<script>alert('x')</script>"))
    assert fd.fingerprint == 0
    assert fd.feature_count == 0
    assert fd.hex == "0"


def test_cleaned_output(write_page, page, tmp_path):
    a = write_page("a.html", page)
    b = write_page("b.html", page)
    sink = CleanedOutput(tmp_path / "out", when=datetime(2024, 1, 2, 3, 4, 5))
    report = run([a, b], sink=sink)
    assert report.output_dir == tmp_path / "out" / "2024-01-02-03-04-05"
    written = sorted(p.name for p in report.output_dir.iterdir())
    assert written == sorted([str(a).replace("/", "_"), str(b).replace("/", "_")])
    content = (report.output_dir / written[0]).read_bytes()
    assert b"quick brown fox" in content
    assert b"<head>" not in content


def test_read_document_missing(tmp_path):
    with pytest.raises(SourceUnavailable) as exc:
        read_document(tmp_path / "missing")
    assert exc.value.code == "ERR_SOURCE_UNAVAILABLE"


def test_load_documents_collects_failures(write_page, page, tmp_path):
    docs, failures = load_documents([write_page("a.html", page), tmp_path / "x"])
    assert len(docs) == 1
    assert docs[0].content == page.encode()
    assert failures[0][0] == str(tmp_path / "x")


def test_report_to_dict(write_page, page):
    report = run([write_page("a.html", page), write_page("b.html", page)])
    d = report.to_dict()
    assert d["pairs"][0]["distance"] == 0
    assert d["pairs"][0]["relationship"] == "Identical"
    assert d["failures"] == []
    assert d["documents"][0]["fingerprint"] == report.documents[0].hex


def test_workers_pass_hash_choice(write_page, page):
    paths = [write_page("a.html", page), write_page("b.html", OTHER)]
    seq = run(paths, hash_name="sha1")
    par = run(paths, hash_name="sha1", workers=2)
    assert [d.fingerprint for d in seq.documents] == [d.fingerprint for d in par.documents]
    assert seq.documents[0].fingerprint != run(paths).documents[0].fingerprint
