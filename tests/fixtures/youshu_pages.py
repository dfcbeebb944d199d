"""youshu.me 페이지 자산

실제 사이트 구조(.c_row / .c_subject / .c_tag)를 축약한 HTML 문자열입니다.
바이트가 필요한 테스트는 선언된 charset 으로 직접 인코딩해서 씁니다.
"""

SEARCH_PAGE_SANTI = """<html>
<head>
<meta http-equiv="Content-Type" content="text/html; charset=gbk">
<title>三体 - 搜索结果</title>
</head>
<body>
<div class="c_row">
  <div class="fl"><a href="/book/1001"><img src="//img.youshu.me/cover/1001.jpg"></a></div>
  <div class="c_subject"><a href="/book/1001">三体</a></div>
  <div class="c_tag">
    <span class="c_label">作者：</span><span class="c_value">刘慈欣</span>
    <span class="c_label">类别：</span><span class="c_value">科幻</span>
  </div>
  <div class="c_tag">
    <span class="c_label">来源：</span><span class="c_value">起点中文网</span>
    <span class="c_label">字数：</span><span class="c_value">88.5万</span>
    <span class="c_label">更新：</span><span class="c_value">2010-11-01</span>
  </div>
  <div class="c_description">  文化大革命如火如荼进行的同时，
     军方探寻外星文明的绝秘计划取得了突破性进展。  </div>
</div>
<div class="c_row">
  <div class="fl"><img src="/cover/1002.jpg"></div>
  <div class="c_subject"><a href="https://youshu.me/book/1002">三体II：黑暗森林</a></div>
  <div class="c_tag">
    <span class="c_label">分类</span><span class="c_value">科幻</span>
    <span class="c_label">字数:</span><span class="c_value">345,678</span>
  </div>
</div>
</body>
</html>
"""

SEARCH_PAGE_WITH_BROKEN_ROW = """<html><head><meta charset="utf-8"></head>
<body>
<div class="c_row">
  <div class="c_subject"><a href="/book/2001">球状闪电</a></div>
  <div class="c_tag"><span class="c_label">作者</span><span class="c_value">刘慈欣</span></div>
</div>
<div class="c_row">
  <div class="c_subject"><a href="/book/2002">   </a></div>
  <div class="c_tag"><span class="c_label">作者</span><span class="c_value">无名氏</span></div>
</div>
<div class="c_row">
  <div class="c_tag"><span class="c_label">作者</span><span class="c_value">也没有标题</span></div>
</div>
<div class="c_row">
  <div class="c_subject"><a href="book/2004">超新星纪元</a></div>
  <div class="c_tag"><span class="c_label">平台</span><span class="c_value">晋江文学城</span></div>
</div>
</body></html>
"""

EMPTY_SEARCH_PAGE = """<html><head><meta charset="utf-8"></head>
<body><div class="search_empty">没有找到相关作品</div></body></html>
"""

DETAIL_PAGE_STRUCTURED = """<html><head><meta charset="utf-8"><title>三体</title></head>
<body>
<div class="bookinfo">
  <ul>
    <li>作者：刘慈欣</li>
    <li>作品分类：<a href="/category/sf">科幻</a></li>
    <li>首发网站：起点中文网</li>
  </ul>
</div>
</body></html>
"""

DETAIL_PAGE_SPLIT_BLOCKS = """<html><head><meta charset="utf-8"></head>
<body>
<div class="bookinfo"><ul><li>作品分类：玄幻</li></ul></div>
<div class="workinfo"><ul><li>作品分类：仙侠</li><li>首发平台：纵横中文网</li></ul></div>
</body></html>
"""

DETAIL_PAGE_UNSTRUCTURED = """<html><head><meta charset="utf-8">
</head>
<body>
<script>var meta = "作品分类：脚本";</script>
<style>.x:after { content: "首发网站：样式"; }</style>
<div class="info"><span>小说类型：都市</span> | <span>首发平台：番茄小说</span></div>
</body></html>
"""

DETAIL_PAGE_NO_META = """<html><head><meta charset="utf-8"></head>
<body><p>本书暂无详细信息</p></body></html>
"""


def encode_page(html: str, encoding: str = "gbk") -> bytes:
    return html.encode(encoding)
