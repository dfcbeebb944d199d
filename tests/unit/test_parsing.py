"""youshu.me HTML 파싱 단위 테스트 (네트워크 없음)"""

from __future__ import annotations

from selectolax.parser import HTMLParser

from shelfmeta.crawlers.youshu.parsing import (
    LabelTable,
    assign_detail_values,
    extract_detail,
    extract_row_meta,
    extract_search_results,
    get_detail_selectors,
    get_listing_table,
)
from shelfmeta.schemas.search_schema import EMPTY_DESCRIPTION, UNKNOWN_AUTHOR
from tests.fixtures.youshu_pages import (
    DETAIL_PAGE_NO_META,
    DETAIL_PAGE_SPLIT_BLOCKS,
    DETAIL_PAGE_STRUCTURED,
    DETAIL_PAGE_UNSTRUCTURED,
    EMPTY_SEARCH_PAGE,
    SEARCH_PAGE_SANTI,
    SEARCH_PAGE_WITH_BROKEN_ROW,
)

BASE = "https://youshu.me"


def _row_html(index: int) -> str:
    return (
        '<div class="c_row">'
        f'<div class="c_subject"><a href="/book/{index}">作品{index}</a></div>'
        "</div>"
    )


class TestLabelTables:
    def test_listing_labels_loaded_from_yaml(self) -> None:
        table = get_listing_table()
        assert table.field_for("作者") == "author"
        assert table.field_for("题材") == "category"
        assert table.field_for("平台") == "platform"
        assert table.field_for("字数") == "word_count"
        assert table.field_for("更新") is None

    def test_detail_selectors_in_priority_order(self) -> None:
        selectors = get_detail_selectors()
        assert selectors[0] == ".bookinfo li"
        assert ".workinfo li" in selectors


class TestSearchResults:
    def test_full_rows(self) -> None:
        results = extract_search_results(SEARCH_PAGE_SANTI, base_url=BASE)

        assert len(results) == 2
        first, second = results

        assert first.title == "三体"
        assert first.author == "刘慈欣"
        assert first.category == "科幻"
        assert first.platform == "起点中文网"
        assert first.word_count == 885000
        assert first.source_url == "https://youshu.me/book/1001"
        assert first.cover_url == "https://images.weserv.nl/?url=ssl:img.youshu.me/cover/1001.jpg"
        assert first.description.startswith("文化大革命如火如荼进行的同时， 军方")
        assert "\n" not in first.description

        assert second.title == "三体II：黑暗森林"
        assert second.author == UNKNOWN_AUTHOR
        assert second.category == "科幻"
        assert second.platform is None
        assert second.word_count == 345678
        assert second.description == EMPTY_DESCRIPTION
        assert second.source_url == "https://youshu.me/book/1002"
        assert second.cover_url == "https://images.weserv.nl/?url=ssl:youshu.me/cover/1002.jpg"

    def test_rows_without_title_are_skipped(self) -> None:
        """제목 없는 행은 버리고 뒤의 행은 계속 처리"""
        results = extract_search_results(SEARCH_PAGE_WITH_BROKEN_ROW, base_url=BASE)

        assert [r.title for r in results] == ["球状闪电", "超新星纪元"]
        assert results[1].source_url == "https://youshu.me/book/2004"
        assert results[1].platform == "晋江文学城"
        assert results[1].author == UNKNOWN_AUTHOR
        assert results[1].cover_url == ""

    def test_result_count_is_capped(self) -> None:
        html = "<html><body>" + "".join(_row_html(i) for i in range(30)) + "</body></html>"

        results = extract_search_results(html, max_results=20, base_url=BASE)

        assert len(results) == 20
        assert results[0].title == "作品0"
        assert results[-1].title == "作品19"

    def test_page_without_rows(self) -> None:
        assert extract_search_results(EMPTY_SEARCH_PAGE) == []
        assert extract_search_results("") == []

    def test_row_meta_value_follows_its_label(self) -> None:
        html = (
            '<div class="c_row"><div class="c_tag">'
            '<span class="c_value">孤儿值</span>'
            '<span class="c_label">作者：</span><span class="c_value">猫腻</span>'
            '<span class="c_label">未知标签</span><span class="c_value">忽略</span>'
            "</div></div>"
        )
        row = HTMLParser(html).css_first(".c_row")

        meta = extract_row_meta(row)

        assert meta["author"] == "猫腻"
        assert meta["category"] == ""
        assert meta["word_count"] == 0

    def test_custom_label_table(self) -> None:
        html = '<div class="c_row"><div class="c_tag"><span class="c_label">写手</span><span class="c_value">某人</span></div></div>'
        row = HTMLParser(html).css_first(".c_row")
        table = LabelTable(fields={"author": ("写手",)})

        assert extract_row_meta(row, table)["author"] == "某人"


class TestDetail:
    def test_structured_block(self) -> None:
        detail = extract_detail(DETAIL_PAGE_STRUCTURED)

        assert detail.category == "科幻"
        assert detail.platform == "起点中文网"
        assert detail.is_complete

    def test_earlier_block_is_not_overwritten(self) -> None:
        """먼저 찾은 값은 뒤 블록에서 다시 찾아도 유지"""
        detail = extract_detail(DETAIL_PAGE_SPLIT_BLOCKS)

        assert detail.category == "玄幻"
        assert detail.platform == "纵横中文网"

    def test_document_text_fallback_ignores_scripts(self) -> None:
        detail = extract_detail(DETAIL_PAGE_UNSTRUCTURED)

        assert detail.category == "都市"
        assert detail.platform == "番茄小说"

    def test_missing_fields_are_none(self) -> None:
        detail = extract_detail(DETAIL_PAGE_NO_META)

        assert detail.category is None
        assert detail.platform is None
        assert not detail.is_complete

    def test_assign_values_stops_at_punctuation(self) -> None:
        found: dict[str, str] = {}
        assign_detail_values("作品类型 : 历史，首发站点：17K。", found)

        assert found == {"category": "历史", "platform": "17K"}

    def test_assign_values_keeps_existing(self) -> None:
        found = {"category": "科幻"}
        assign_detail_values("作品分类：奇幻 首发网站：起点", found)

        assert found == {"category": "科幻", "platform": "起点"}
