# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Unit tests for the parse-once document cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from doclinks.core.model_types import DefectKind, LoadMode
from doclinks.core.type_aliases import RelPath
from doclinks.links.cache import CorpusReadError, DocumentCache, FileEntry, IsRedirectError, encode_anchor
from doclinks.links.redirects import BrokenRedirectError
from doclinks.links.report import Defect

if TYPE_CHECKING:
    from pathlib import Path

    from tests.fixtures.corpus import CorpusBuilder

pytestmark = pytest.mark.unit


def _cache(root: Path, sink: list[Defect]) -> DocumentCache:
    return DocumentCache(root, sink.append)


def test_encode_anchor_applies_the_escape_table() -> None:
    assert encode_anchor("impl<T> Foo for [T]") == "impl%3CT%3E%20Foo%20for%20%5BT%5D"
    assert encode_anchor("a?b'c&d,e:f;g\"h") == "a%3Fb%27c%26d%2Ce%3Af%3Bg%22h"
    assert encode_anchor("plain-id") == "plain-id"


def test_parse_ids_registers_raw_and_encoded_forms() -> None:
    sink: list[Defect] = []
    entry = FileEntry(source="")

    entry.parse_ids(RelPath("a.html"), '<h2 id="impl Foo">\n<h3 id="#hashed">', sink.append)

    assert entry.ids == {"impl Foo", "impl%20Foo", "hashed"}
    assert sink == []


def test_parse_ids_reports_duplicates_and_keeps_the_id() -> None:
    sink: list[Defect] = []
    entry = FileEntry(source="")
    contents = '<p id="x">\n<p id="y">\n<p id="x">'

    entry.parse_ids(RelPath("b.html"), contents, sink.append)

    assert sink == [Defect(DefectKind.DUPLICATE_ID, RelPath("b.html"), 3, "x")]
    assert "x" in entry.ids


def test_parse_ids_runs_once_even_without_anchors() -> None:
    sink: list[Defect] = []
    entry = FileEntry(source="")

    entry.parse_ids(RelPath("c.html"), "<p>no anchors</p>", sink.append)
    entry.parse_ids(RelPath("c.html"), '<p id="late"><p id="late">', sink.append)

    assert entry.parsed
    assert entry.ids == set()
    assert sink == []


def test_second_parse_emits_no_new_duplicate_warnings() -> None:
    sink: list[Defect] = []
    entry = FileEntry(source="")
    contents = '<p id="x"><p id="x">'

    entry.parse_ids(RelPath("d.html"), contents, sink.append)
    first = set(entry.ids)
    entry.parse_ids(RelPath("d.html"), contents, sink.append)

    assert entry.ids == first
    assert len(sink) == 1


def test_encoded_alias_does_not_count_as_duplicate() -> None:
    sink: list[Defect] = []
    entry = FileEntry(source="")

    entry.parse_ids(RelPath("e.html"), '<p id="a b">\n<p id="a%20b">', sink.append)

    assert sink == []


def test_load_reads_once_and_returns_cached_contents(corpus: CorpusBuilder) -> None:
    path = corpus.page("a.html", '<p id="x">')
    cache = _cache(corpus.root, [])

    first = cache.load(path, LoadMode.FOLLOW)
    path.unlink()
    second = cache.load(path, LoadMode.FOLLOW)

    assert first.rel_path == "a.html"
    assert second == first
    assert "a.html" in cache
    assert len(cache) == 1


def test_release_keeps_anchor_set(corpus: CorpusBuilder) -> None:
    path = corpus.page("a.html", '<p id="x">')
    cache = _cache(corpus.root, [])
    document = cache.load(path, LoadMode.SKIP_REDIRECT)
    _ = cache.parse_ids(document.rel_path, document.contents)

    cache.release(document.rel_path)

    assert cache.entry(document.rel_path).source == ""
    assert cache.load(path, LoadMode.FOLLOW).contents == ""
    assert cache.parse_ids(document.rel_path, "") == {"x"}



def test_release_before_parse_reads_again(corpus: CorpusBuilder) -> None:
    path = corpus.write("LICENSE", "<p id=\"x\">\n")
    cache = _cache(corpus.root, [])
    document = cache.load(path, LoadMode.FOLLOW)

    cache.release(document.rel_path)
    reloaded = cache.load(path, LoadMode.FOLLOW)

    assert reloaded.contents == "<p id=\"x\">\n"
    assert cache.parse_ids(reloaded.rel_path, reloaded.contents) == {"x"}

def test_skip_mode_reports_redirect_pages(corpus: CorpusBuilder) -> None:
    path = corpus.redirect("old.html", "new.html")
    _ = corpus.page("new.html")
    cache = _cache(corpus.root, [])

    with pytest.raises(IsRedirectError):
        _ = cache.load(path, LoadMode.SKIP_REDIRECT)
    assert "old.html" not in cache
    with pytest.raises(IsRedirectError):
        _ = cache.load(path, LoadMode.SKIP_REDIRECT)


def test_follow_mode_loads_redirect_target(corpus: CorpusBuilder) -> None:
    path = corpus.redirect("sub/old.html", "../new.html")
    _ = corpus.page("new.html", '<p id="here">')
    cache = _cache(corpus.root, [])

    document = cache.load(path, LoadMode.FOLLOW)

    assert document.rel_path == "new.html"
    assert 'id="here"' in document.contents


def test_missing_redirect_target_is_a_broken_redirect(corpus: CorpusBuilder) -> None:
    path = corpus.redirect("r.html", "target.html")
    cache = _cache(corpus.root, [])

    with pytest.raises(BrokenRedirectError) as excinfo:
        _ = cache.load(path, LoadMode.FOLLOW)

    assert excinfo.value.target == "target.html"


def test_unreadable_document_is_fatal(corpus: CorpusBuilder) -> None:
    cache = _cache(corpus.root, [])

    with pytest.raises(CorpusReadError):
        _ = cache.load(corpus.root / "missing.html", LoadMode.FOLLOW)


def test_undecodable_document_is_fatal(corpus: CorpusBuilder) -> None:
    path = corpus.root / "binary.html"
    _ = path.write_bytes(b"\xff\xfe\x00broken")
    cache = _cache(corpus.root, [])

    with pytest.raises(CorpusReadError):
        _ = cache.load(path, LoadMode.SKIP_REDIRECT)


@pytest.mark.parametrize("url", ["/elsewhere/page.html", "../../outside.html"])
def test_redirect_leaving_the_root_is_a_broken_redirect(corpus: CorpusBuilder, url: str) -> None:
    path = corpus.redirect("r.html", url)
    cache = _cache(corpus.root, [])

    with pytest.raises(BrokenRedirectError) as excinfo:
        _ = cache.load(path, LoadMode.FOLLOW)

    assert excinfo.value.target == url
