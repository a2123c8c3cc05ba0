"""
Rich text (blocks editor) document tree.

Top-level blocks are paragraphs, headings and lists. Inline children are
text runs or links, and links nest further inline children.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from .types import Number


class _Node(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TextNode(_Node):
    type: Literal["text"]
    text: StrictStr
    bold: Optional[StrictBool] = None
    italic: Optional[StrictBool] = None
    underline: Optional[StrictBool] = None
    strikethrough: Optional[StrictBool] = None
    code: Optional[StrictBool] = None


class LinkNode(_Node):
    type: Literal["link"]
    url: StrictStr
    children: list["InlineNode"]


InlineNode = Annotated[Union[TextNode, LinkNode], Field(discriminator="type")]

LinkNode.model_rebuild()


class ParagraphBlock(_Node):
    type: Literal["paragraph"]
    children: list[InlineNode]


class HeadingBlock(_Node):
    type: Literal["heading"]
    level: Number
    children: list[InlineNode]


class ListItemBlock(_Node):
    type: Literal["list-item"]
    children: list[InlineNode]


class ListBlock(_Node):
    type: Literal["list"]
    format: Literal["ordered", "unordered"]
    children: list[ListItemBlock]


RichTextBlock = Annotated[
    Union[ParagraphBlock, HeadingBlock, ListBlock], Field(discriminator="type")
]

RichTextBlocks = list[RichTextBlock]
