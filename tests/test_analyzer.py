"""
Tests for the Solidity analyzer — end-to-end structure recovery and fault tolerance.
"""

import time

from solmigrate.core import analyzer as analyzer_module
from solmigrate.core.analyzer import analyze
from solmigrate.models.analysis_models import Complexity, ContractKind


MINIMAL_ERC20 = (
    "contract T { "
    "function transfer(address,uint256) public returns(bool){} "
    "function approve(address,uint256) public returns(bool){} "
    "function transferFrom(address,address,uint256) public returns(bool){} "
    "}"
)


# ── reference scenarios ────────────────────────────────────────────────

def test_minimal_erc20():
    result = analyze(MINIMAL_ERC20)
    assert len(result.contracts) == 1
    assert result.is_erc20 is True
    assert result.is_erc721 is False
    transfer = result.contracts[0].functions[0]
    assert [p.type_name for p in transfer.parameters] == ["address", "uint256"]
    assert [p.type_name for p in transfer.return_parameters] == ["bool"]


def test_empty_file():
    result = analyze("")
    assert result.contracts == ()
    assert result.pragma_version == "unknown"
    assert result.imports == ()
    assert result.complexity == Complexity.LOW
    assert result.errors == ()
    assert result.main_contract is None


def test_mapping_detection():
    result = analyze("contract M { mapping(address => uint256) public balances; }")
    (var,) = result.contracts[0].state_variables
    assert var.name == "balances"
    assert var.type_name.startswith("mapping")
    assert result.has_mappings is True


def test_constructor_ordering():
    source = "contract C {\n  function foo() public {}\n  constructor(address a) {}\n}\n"
    functions = analyze(source).contracts[0].functions
    assert functions[0].is_constructor is True
    assert functions[1].name == "foo"


def test_sixteen_functions_is_high_complexity():
    body = "\n".join(f"  function f{i}() public {{}}" for i in range(16))
    result = analyze(f"contract Big {{\n{body}\n}}\n")
    assert len(result.contracts[0].functions) == 16
    assert result.contracts[0].state_variables == ()
    assert result.complexity == Complexity.HIGH


def test_malformed_braces_keep_earlier_contracts():
    source = "contract Good { uint256 public x; }\ncontract Broken {\n  function f() public {\n"
    result = analyze(source)
    assert [c.name for c in result.contracts] == ["Good"]
    assert result.errors
    assert "Broken" in result.errors[0]


def test_malformed_first_contract_yields_nothing():
    result = analyze("contract A {\n function f() public {\n")
    assert result.contracts == ()
    assert len(result.errors) == 1


# ── properties ─────────────────────────────────────────────────────────

def test_determinism(erc20_source):
    assert analyze(erc20_source) == analyze(erc20_source)
    assert analyze(erc20_source).model_dump() == analyze(erc20_source).model_dump()


def test_reanalysis_is_stable(nft_source):
    first = analyze(nft_source)
    second = analyze(str(nft_source))
    assert [c.name for c in first.contracts] == [c.name for c in second.contracts]
    assert first.contracts == second.contracts


def test_mapping_count_matches_type_prefix(erc20_analysis):
    mapping_vars = [
        v
        for c in erc20_analysis.contracts
        for v in c.state_variables
        if v.type_name.startswith("mapping")
    ]
    assert len(mapping_vars) == len(erc20_analysis.mapping_variables) == 2


# ── full fixtures ──────────────────────────────────────────────────────

def test_erc20_fixture(erc20_analysis):
    result = erc20_analysis
    assert result.errors == ()
    assert result.pragma_version == "^0.8.20"
    assert result.imports == ("@openzeppelin/contracts/access/Ownable.sol", "./IERC20.sol")

    (token,) = result.contracts
    assert token.name == "MyToken"
    assert token.kind == ContractKind.CONTRACT
    assert token.base_contracts == ("Ownable", "IERC20")

    variables = {v.name: v for v in token.state_variables}
    assert list(variables) == [
        "name", "symbol", "decimals", "totalSupply", "treasury", "balanceOf", "_allowances",
    ]
    assert variables["decimals"].constant is True
    assert variables["treasury"].immutable is True
    assert variables["_allowances"].visibility == "private"

    names = [f.name for f in token.functions]
    assert names == ["constructor", "onlyTreasury", "transfer", "approve", "transferFrom", "allowance"]
    assert token.functions[1].is_modifier is True
    allowance = token.functions[-1]
    assert allowance.visibility == "external"
    assert allowance.state_mutability == "view"

    assert [e.name for e in token.events] == ["Transfer", "Approval"]

    assert result.is_erc20 is True
    assert result.is_erc721 is False
    assert result.has_ownable is True
    assert result.has_access_control is False
    assert result.has_mappings is True
    assert result.has_events is True
    assert result.complexity == Complexity.LOW
    assert result.token_standard == "ERC-20"


def test_nft_fixture(nft_analysis):
    result = nft_analysis
    assert result.errors == ()
    assert result.pragma_version == ">=0.8.0 <0.9.0"
    assert [c.name for c in result.contracts] == ["Base", "Collectible"]
    assert result.contracts[0].is_abstract is True

    nft = result.main_contract
    assert nft.name == "Collectible"
    assert nft.base_contracts == ("ERC721", "AccessControl", "Base")
    assert [f.name for f in nft.functions] == [
        "constructor", "mint", "safeTransferFrom", "version", "receive",
    ]
    mint = nft.functions[1]
    assert mint.state_mutability == "payable"
    assert [(p.name, p.type_name) for p in mint.parameters] == [("to", "address"), ("uri", "string")]
    assert [(p.name, p.type_name) for p in mint.return_parameters] == [("id", "uint256")]

    assert result.is_erc721 is True
    assert result.is_erc20 is False
    assert result.has_access_control is True
    assert result.has_ownable is False
    assert result.token_standard == "ERC-721"


def test_fake_contract_in_doc_comment_is_ignored(erc20_analysis):
    assert "Fake" not in [c.name for c in erc20_analysis.contracts]


def test_analyzer_never_raises(monkeypatch):
    calls = {"n": 0}

    def explode_once(contracts, source):
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("boom")
        return original(contracts, source)

    original = analyzer_module.classify
    monkeypatch.setattr(analyzer_module, "classify", explode_once)
    result = analyze("contract A { }")
    assert any("Analysis aborted" in e for e in result.errors)
    assert [c.name for c in result.contracts] == ["A"]


def test_extraction_failure_is_isolated_per_contract(monkeypatch):
    original = analyzer_module.extract_contract

    def flaky(span):
        if span.name == "Bad":
            raise ValueError("cannot extract")
        return original(span)

    monkeypatch.setattr(analyzer_module, "extract_contract", flaky)
    result = analyze("contract Bad { }\ncontract Fine { }\n")
    assert [c.name for c in result.contracts] == ["Fine"]
    assert len(result.errors) == 1
    assert "Bad" in result.errors[0]


# ── pathological input ─────────────────────────────────────────────────

def _timed_analyze(source):
    start = time.perf_counter()
    result = analyze(source)
    return result, time.perf_counter() - start


def test_unterminated_headers_scan_in_linear_time():
    result, elapsed = _timed_analyze("contract A is B\n" * 20000)
    assert elapsed < 2.0
    assert result.contracts == ()


def test_many_headers_before_one_body_scan_in_linear_time():
    result, elapsed = _timed_analyze("contract A is B\n" * 20000 + "contract Last is Base { }\n")
    assert elapsed < 2.0
    assert [c.name for c in result.contracts] == ["Last"]
    assert result.contracts[0].base_contracts == ("Base",)


def test_unterminated_imports_scan_in_linear_time():
    result, elapsed = _timed_analyze("import x\n" * 20000)
    assert elapsed < 2.0
    assert result.imports == ()


def test_classifier_failure_falls_back_to_defaults(monkeypatch):
    def always_explode(contracts, source):
        raise RuntimeError("classifier down")

    monkeypatch.setattr(analyzer_module, "classify", always_explode)
    result = analyze(MINIMAL_ERC20)
    assert any("Analysis aborted" in e for e in result.errors)
    assert result.complexity == Complexity.LOW
    assert result.is_erc20 is False
    assert result.line_count == 1
