"""
Tests for the structural scanner — masking, brace matching and declaration spans.
"""

import pytest

from solmigrate.core.scanner import (
    UnterminatedBodyError,
    ScanError,
    extract_imports,
    extract_pragma,
    find_matching,
    mask_source,
    scan_declarations,
    split_top_level,
)
from solmigrate.models.analysis_models import ContractKind


def test_mask_preserves_length_and_newlines():
    source = 'a // comment {\nb = "x}y";\n/* multi\nline { */ c'
    masked = mask_source(source)
    assert len(masked) == len(source)
    assert [i for i, ch in enumerate(masked) if ch == "\n"] == [
        i for i, ch in enumerate(source) if ch == "\n"
    ]
    assert "{" not in masked
    assert "}" not in masked
    assert masked.startswith("a ")
    assert masked.rstrip().endswith("c")


def test_mask_keeps_quote_characters():
    masked = mask_source("s = 'abc';")
    assert masked == "s = '   ';"


def test_mask_handles_escaped_quotes():
    source = 's = "a\\"{b";'
    masked = mask_source(source)
    assert "{" not in masked
    assert masked.endswith('";')


def test_mask_unclosed_string_stops_at_newline():
    masked = mask_source('s = "oops\ncontract A {}')
    assert "contract A {}" in masked


def test_find_matching_nested():
    text = "{ a { b } c }"
    assert find_matching(text, 0) == len(text) - 1
    assert find_matching(text, 4) == 8


def test_find_matching_unbalanced():
    assert find_matching("{ {", 0) == -1


def test_split_top_level_ignores_nested_commas():
    parts = split_top_level('ERC721(a, b), AccessControl, Base')
    assert [p.strip() for p in parts] == ["ERC721(a, b)", "AccessControl", "Base"]


def test_scan_finds_all_kinds_in_order():
    source = (
        "interface IThing { function f() external; }\n"
        "library Math { }\n"
        "abstract contract Base { }\n"
        "contract Impl is Base, IThing { }\n"
    )
    spans = list(scan_declarations(source))
    assert [s.name for s in spans] == ["IThing", "Math", "Base", "Impl"]
    assert [s.kind for s in spans] == [
        ContractKind.INTERFACE,
        ContractKind.LIBRARY,
        ContractKind.CONTRACT,
        ContractKind.CONTRACT,
    ]
    assert spans[2].is_abstract is True
    assert spans[3].is_abstract is False
    assert spans[3].base_names == ("Base", "IThing")


def test_scan_strips_base_constructor_arguments():
    source = 'contract Token is ERC20("Name", "SYM"), Ownable(msg.sender) { }'
    (span,) = scan_declarations(source)
    assert span.base_names == ("ERC20", "Ownable")


def test_scan_body_ignores_braces_in_comments_and_strings():
    source = (
        "contract A {\n"
        '    string s = "}";\n'
        "    // }\n"
        "    /* } */\n"
        "    uint256 x;\n"
        "}\n"
        "contract B { }\n"
    )
    spans = list(scan_declarations(source))
    assert [s.name for s in spans] == ["A", "B"]
    assert "uint256 x;" in spans[0].body


def test_scan_ignores_declarations_in_comments():
    source = "// contract Ghost { }\n/* contract Ghost2 { } */\ncontract Real { }\n"
    assert [s.name for s in scan_declarations(source)] == ["Real"]


def test_scan_finds_declarations_mid_line():
    assert [s.name for s in scan_declarations("uint x; contract Inline { }\n")] == ["Inline"]
    assert [s.name for s in scan_declarations("pragma solidity ^0.8.0; contract A { uint x; }")] == ["A"]
    assert [s.name for s in scan_declarations("contract A {} contract B {}")] == ["A", "B"]


def test_scan_keyword_must_stand_alone():
    source = "mycontract X { }\nfoo.contract Y { }\ncontract Z { }\n"
    assert [s.name for s in scan_declarations(source)] == ["Z"]


def test_scan_header_without_body_is_skipped():
    source = "contract A is B\ncontract C { }\n"
    (span,) = scan_declarations(source)
    assert span.name == "C"
    assert span.base_names == ()


def test_scan_unterminated_body_raises_after_valid_spans():
    source = "contract Good { }\ncontract Broken {\n function f() public {\n"
    spans = scan_declarations(source)
    assert next(spans).name == "Good"
    with pytest.raises(UnterminatedBodyError) as exc_info:
        next(spans)
    assert exc_info.value.name == "Broken"
    assert isinstance(exc_info.value, ScanError)


def test_scan_empty_source():
    assert list(scan_declarations("")) == []


def test_extract_pragma():
    assert extract_pragma("pragma solidity ^0.8.20;\ncontract A {}") == "^0.8.20"
    assert extract_pragma("pragma solidity >=0.8.0 <0.9.0;") == ">=0.8.0 <0.9.0"


def test_extract_pragma_absent_or_commented():
    assert extract_pragma("contract A {}") == "unknown"
    assert extract_pragma("// pragma solidity ^0.8.0;\n") == "unknown"
    assert extract_pragma("pragma solidity ^0.8.0\ncontract A {}") == "unknown"


def test_extract_imports_all_forms(erc20_source):
    source = (
        'import "./A.sol";\n'
        "import './B.sol';\n"
        'import {C} from "./C.sol";\n'
        'import * as D from "./D.sol";\n'
        '// import "./Hidden.sol";\n'
    )
    assert extract_imports(source) == ["./A.sol", "./B.sol", "./C.sol", "./D.sol"]
    assert extract_imports(erc20_source) == [
        "@openzeppelin/contracts/access/Ownable.sol",
        "./IERC20.sol",
    ]


def test_extract_imports_without_terminator():
    assert extract_imports('import "./A.sol";\nimport "./B.sol"') == ["./A.sol", "./B.sol"]
    assert extract_imports("import x\n" * 50) == []
