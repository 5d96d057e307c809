from pathlib import Path

import pytest


def volume_html(
    vol_num: int | None,
    vol_name: str | None,
    book_num: str = "A045",
    start_pos: int | None = None,
    max_page: int | None = None,
) -> str:
    lines = ["<html><head><script>", f'var bookNum = "{book_num}";']
    if vol_num is not None:
        lines.append(f"var volNum = {vol_num};")
    if vol_name is not None:
        lines.append(f'var volName = "{vol_name}";')
    if start_pos is not None:
        lines.append(f"var volStartPos = {start_pos};")
    if max_page is not None:
        lines.append(f"var volMaxPage = {max_page};")
    lines.append("</script></head><body><div id='viewer'></div></body></html>")
    return "\n".join(lines)


def menu_html(*hrefs: str) -> str:
    items = "\n".join(f'<a href="{href}">{href}</a><br>' for href in hrefs)
    return f"<html><body>\n<a href=\"top.html\">目錄</a>\n{items}\n</body></html>"


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def html_root(tmp_path) -> Path:
    """
    A miniature mirror:

    top.html             經部: A045 (menu, 2 good volumes + 1 malformed), sub/top.html
                         史部: ShiSanJingZhuShu/index.html (nothing to resolve)
    sub/top.html         C002 (no menu, two volumes found by scanning), link back to top
    """
    root = tmp_path / "html"
    write(
        root / "top.html",
        """<html><body>
<p><a href="about.html">About this library</a></p>
<h2>經部</h2>
<a href="A045menu.html">尚書正義二十卷</a>　宋刊本 孔穎達疏 有圖記<br>
<a href="sub/top.html">叢書</a><br>
<h2>史部</h2>
<a href="ShiSanJingZhuShu/index.html">十三經注疏</a><br>
</body></html>
""",
    )
    write(
        root / "A045menu.html",
        menu_html("A0450001.html", "A0450002.html", "A0450003.html"),
    )
    write(root / "A0450001.html", volume_html(1, "尚書正義卷第一", max_page=40))
    write(
        root / "A0450002.html",
        volume_html(2, "尚書正義卷第二", start_pos=41, max_page=38),
    )
    write(root / "A0450003.html", volume_html(3, None))

    write(
        root / "sub" / "top.html",
        """<html><body>
<a href="C002menu.html">周易注疏殘本</a>　明鈔本 王弼注 存卷一<br>
<a href="../top.html">返回</a><br>
</body></html>
""",
    )
    write(
        root / "sub" / "C0020001.html", volume_html(1, "周易注疏卷第一", "C002")
    )
    write(
        root / "sub" / "C0020002.html", volume_html(2, "周易注疏卷第二", "C002")
    )
    return root
