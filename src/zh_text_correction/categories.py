# -*- coding: utf-8 -*-
"""
Error category table for the iFlytek text-correction API.

Every vendor category is described by one ErrorCategory entry: display
name, default description, colour, priority, severity, whether an empty
correction is legitimate, what the fourth raw field carries, and the
sub-type phrases documented for the category. Code never branches on a
category name; it looks the entry up here.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping, Optional

from .models import Severity

FourthFieldKind = Literal["type_identifier", "description"]


def severity_for_priority(priority: int) -> Severity:
    """Map a category priority (1 = most important) to a severity tier."""
    if priority <= 2:
        return Severity.HIGH
    if priority <= 5:
        return Severity.MEDIUM
    return Severity.LOW


@dataclass(frozen=True)
class ErrorCategory:
    """Static description of one vendor error category."""
    key: str
    display_name: str
    description: str  # Default description when nothing more specific resolves
    help_text: str
    color: str
    priority: int
    fourth_field: FourthFieldKind = "description"
    may_have_empty_correction: bool = False
    subtypes: Mapping[str, str] = field(default_factory=dict)

    @property
    def severity(self) -> Severity:
        return severity_for_priority(self.priority)


_PUNC_SUBTYPES = {
    "半角标点误用成对符号不匹配": "半角标点误用成对符号不匹配",
    "重复标点": "重复标点",
    "连续使用标点": "连续使用标点符号",
    "顿号使用不当": "顿号使用不当",
    "省略号使用不当": "省略号使用不当",
    "连接号使用不当": "连接号使用不当",
    "标示发文年号不规范": "标示发文年号不规范",
    "疑似省略号误用": "疑似省略号误用",
    "书名号内顿号使用不当": "书名号内顿号使用不当",
    "疑似标点错误": "疑似标点错误",
}


_CATEGORIES = [
    ErrorCategory(
        key="black_list",
        display_name="黑名单纠错",
        description="黑名单纠错",
        help_text="敏感词错误：不当词汇、违规内容等的检测和处理",
        color="#dc3545",
        priority=1,
        fourth_field="type_identifier",
        subtypes={"blacklist": "黑名单错误"},
    ),
    ErrorCategory(
        key="block_list",
        display_name="黑名单纠错",
        description="检测并纠正黑名单词汇",
        help_text="检测并纠正黑名单词汇",
        color="#dc3545",
        priority=1,
        fourth_field="type_identifier",
        subtypes={"blacklist": "黑名单错误"},
    ),
    ErrorCategory(
        key="pol",
        display_name="政治术语纠错",
        description="政治术语纠错",
        help_text="政治术语相关纠错",
        color="#fd7e14",
        priority=1,
        fourth_field="type_identifier",
        subtypes={"pol": "政治术语错误"},
    ),
    ErrorCategory(
        key="char",
        display_name="别字纠错",
        description="别字纠错：单个字符的错误纠正",
        help_text="别字错误：单个字符的错误纠正（如错别字、笔误等）",
        color="#dc3545",
        priority=1,
        subtypes={"char": "别字错误"},
    ),
    ErrorCategory(
        key="word",
        display_name="别词纠错",
        description="别词纠错：词语使用错误的纠正",
        help_text="别词错误：词语使用错误的纠正",
        color="#6f42c1",
        priority=2,
        fourth_field="type_identifier",
        subtypes={"word": "别词错误"},
    ),
    ErrorCategory(
        key="redund",
        display_name="冗余纠错",
        description="冗余纠错：删除多余、重复的字符或词语",
        help_text="冗余错误：删除文本中多余、重复的字符或词语",
        color="#fd7e14",
        priority=3,
        subtypes={"redund": "冗余错误"},
    ),
    ErrorCategory(
        key="miss",
        display_name="缺失纠错",
        description="缺失纠错：补充遗漏的字符或词语",
        help_text="缺失错误：补充文本中遗漏的字符或词语",
        color="#20c997",
        priority=4,
        may_have_empty_correction=True,
        subtypes={"miss": "缺失错误"},
    ),
    ErrorCategory(
        key="order",
        display_name="语序纠错",
        description="语序纠错：调整词语或字符的排列顺序",
        help_text="语序错误：调整词语或字符的排列顺序",
        color="#17a2b8",
        priority=5,
        may_have_empty_correction=True,
        subtypes={"lx_word": "词级别乱序纠错", "lx_char": "字级别乱序纠错"},
    ),
    ErrorCategory(
        key="lx_word",
        display_name="词级别乱序纠错",
        description="词级乱序错误：词语在句子中的排列顺序不当",
        help_text="词级乱序错误：词语在句子中的排列顺序不当",
        color="#fd7e14",
        priority=3,
        fourth_field="type_identifier",
        may_have_empty_correction=True,
    ),
    ErrorCategory(
        key="lx_char",
        display_name="字级别乱序纠错",
        description="字级乱序错误：字符在词语中的排列顺序不当",
        help_text="字级乱序错误：字符在词语中的排列顺序不当",
        color="#e83e8c",
        priority=3,
        fourth_field="type_identifier",
        may_have_empty_correction=True,
    ),
    ErrorCategory(
        key="dapei",
        display_name="搭配纠错",
        description="搭配纠错：词语搭配使用不当的纠正",
        help_text="搭配错误：词语之间的搭配使用不当（如动宾搭配、形容词修饰等）",
        color="#28a745",
        priority=4,
        may_have_empty_correction=True,
        subtypes={"dapei": "搭配错误"},
    ),
    ErrorCategory(
        key="punc",
        display_name="标点纠错",
        description="标点纠错：标点符号使用错误的纠正",
        help_text="标点错误：标点符号的使用、位置或类型错误（如逗号、句号、问号等）",
        color="#6c757d",
        priority=7,
        may_have_empty_correction=True,
        subtypes=_PUNC_SUBTYPES,
    ),
    ErrorCategory(
        key="idm",
        display_name="成语纠错",
        description="成语纠错",
        help_text="成语纠错",
        color="#007bff",
        priority=8,
        may_have_empty_correction=True,
        subtypes={"idm": "成语纠错"},
    ),
    ErrorCategory(
        key="org",
        display_name="机构名纠错",
        description="机构名纠错：机构名称错误的纠正",
        help_text="机构名错误：公司、组织、机构等专有名称的错误",
        color="#17a2b8",
        priority=9,
        may_have_empty_correction=True,
        subtypes={
            "org_R": "org_R-机构名字词冗余",
            "org_M": "org_M-机构名字词缺失",
            "org_S": "org_S-机构名字词错误",
            "org_P": "org_P-机构名字词错序",
        },
    ),
    ErrorCategory(
        key="leader",
        display_name="领导人职称纠错",
        description="领导人职称纠错：领导人姓名或职称错误的纠正",
        help_text="领导人错误：政府官员、企业领导等重要人物姓名或职称的错误",
        color="#495057",
        priority=1,
        may_have_empty_correction=True,
        subtypes={"lea_P": "领导人职称纠错"},
    ),
    ErrorCategory(
        key="number",
        display_name="数字纠错",
        description="数字纠错：数值、时间、日期等数字信息的纠正",
        help_text="数字错误：数值、编号、统计数据、日期、时间等数字信息的错误",
        color="#fd7e14",
        priority=3,
        may_have_empty_correction=True,
        subtypes={
            "time": "时间纠错",
            "date-m": "日期纠错（月份）",
            "date-d": "日期纠错（日）",
        },
    ),
    ErrorCategory(
        key="addr",
        display_name="地名纠错",
        description="地名纠错：地理位置信息错误的纠正",
        help_text="地址错误：街道、城市、省份等地理位置信息的错误",
        color="#20c997",
        priority=3,
        may_have_empty_correction=True,
        subtypes={
            "addr_R": "地名字词冗余",
            "addr_M": "地名字词缺失",
            "addr_S": "地名字词错误",
        },
    ),
    ErrorCategory(
        key="name",
        display_name="全文人名纠错",
        description="人名纠错：个人姓名错误的纠正",
        help_text="人名错误：个人姓名的拼写或用字错误",
        color="#e83e8c",
        priority=2,
        may_have_empty_correction=True,
        subtypes={"name": "全文人名纠错"},
    ),
    ErrorCategory(
        key="grammar_pc",
        display_name="句式杂糅及重复",
        description="语法纠错：句式杂糅和语义重复等问题的纠正",
        help_text="语法错误：句式杂糅和语义重复等语法结构问题",
        color="#dc3545",
        priority=1,
        may_have_empty_correction=True,
        subtypes={"grammar_pc": "句式杂糅"},
    ),
    ErrorCategory(
        key="date-d",
        display_name="日期纠错",
        description="日期错误：日期格式、时间表达等方面的错误",
        help_text="日期错误：日期格式、时间表达等方面的错误",
        color="#17a2b8",
        priority=3,
    ),
]

CATEGORY_TABLE: Mapping[str, ErrorCategory] = MappingProxyType(
    {category.key: category for category in _CATEGORIES}
)

# Keys the vendor uses as category names. A fourth field equal to one of
# these is a type tag, not a free-text description.
KNOWN_CATEGORY_KEYS = frozenset(CATEGORY_TABLE)

INFO_CATEGORY = "info"


def fallback_category(key: str) -> ErrorCategory:
    """Entry used for categories the table does not know."""
    return ErrorCategory(
        key=key,
        display_name=key,
        description=key,
        help_text=key,
        color="#ff6b6b",
        priority=3,
    )


def get_category(
    key: str,
    categories: Optional[Mapping[str, ErrorCategory]] = None,
) -> ErrorCategory:
    """
    Look up a category entry.

    Args:
        key: Vendor category name.
        categories: Table to consult, defaults to CATEGORY_TABLE.

    Returns:
        The table entry, or a medium-priority fallback for unknown keys.
    """
    table = CATEGORY_TABLE if categories is None else categories
    entry = table.get(key)
    if entry is None:
        return fallback_category(key)
    return entry


def is_known_category(
    key: str,
    categories: Optional[Mapping[str, ErrorCategory]] = None,
) -> bool:
    table = CATEGORY_TABLE if categories is None else categories
    return key in table


def empty_correction_categories(
    categories: Optional[Mapping[str, ErrorCategory]] = None,
) -> frozenset[str]:
    """Categories for which corrected == "" is an explicit deletion."""
    table = CATEGORY_TABLE if categories is None else categories
    return frozenset(k for k, c in table.items() if c.may_have_empty_correction)


def display_name(
    key: str,
    categories: Optional[Mapping[str, ErrorCategory]] = None,
) -> str:
    return get_category(key, categories).display_name
