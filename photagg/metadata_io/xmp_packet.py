# -*- coding: utf-8 -*-
"""
构造最小 XMP 数据包：Dublin Core 标题/描述/关键词 + photoshop:Category。
"""
from __future__ import annotations

from photagg.metadata_io.encoders import escape_xml

XMP_TOOLKIT = "Adobe XMP Core 5.6-c140 79.160451, 2017/05/06-01:08:21        "

_PACKET_TEMPLATE = """<x:xmpmeta xmlns:x="adobe:ns:meta/" x:xmptk="{toolkit}">
 <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
  <rdf:Description rdf:about=""
    xmlns:dc="http://purl.org/dc/elements/1.1/"
    xmlns:photoshop="http://ns.adobe.com/photoshop/1.0/">
   <dc:title>
    <rdf:Alt>
     <rdf:li xml:lang="x-default">{title}</rdf:li>
    </rdf:Alt>
   </dc:title>
   <dc:description>
    <rdf:Alt>
     <rdf:li xml:lang="x-default">{description}</rdf:li>
    </rdf:Alt>
   </dc:description>
   <dc:subject>
    <rdf:Bag>
     {keywords}
    </rdf:Bag>
   </dc:subject>
   {category}
  </rdf:Description>
 </rdf:RDF>
</x:xmpmeta>"""


def build_xmp_packet(
    title: str,
    description: str,
    keywords: list[str],
    category: str | None = None,
) -> str:
    """所有用户文本先经 escape_xml；category 为空时不输出 photoshop:Category 元素。"""
    keywords_xml = "".join(f"<rdf:li>{escape_xml(k)}</rdf:li>" for k in keywords or [])
    category_xml = ""
    if category:
        category_xml = f"<photoshop:Category>{escape_xml(category)}</photoshop:Category>"
    return _PACKET_TEMPLATE.format(
        toolkit=XMP_TOOLKIT,
        title=escape_xml(title),
        description=escape_xml(description),
        keywords=keywords_xml,
        category=category_xml,
    )
