"""
Test fixtures shared across all migration tests.
"""

import pytest


@pytest.fixture
def erc20_source():
    """Ownable ERC-20 token with mappings, events, a modifier and a trailing constructor."""
    return '''// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

import "@openzeppelin/contracts/access/Ownable.sol";
import {IERC20} from "./IERC20.sol";

/// @notice A simple token. contract Fake { }
contract MyToken is Ownable, IERC20 {
    string public name = "My {Token}";
    string public symbol = "MTK";
    uint8 public constant decimals = 18;
    uint256 public totalSupply;
    address public immutable treasury;
    mapping(address => uint256) public balanceOf;
    mapping(address => mapping(address => uint256)) private _allowances;

    event Transfer(address indexed from, address indexed to, uint256 value);
    event Approval(address indexed owner, address indexed spender, uint256 value);

    modifier onlyTreasury() {
        require(msg.sender == treasury, "not treasury }");
        _;
    }

    function transfer(address to, uint256 amount) external returns (bool) {
        uint256 fromBalance = balanceOf[msg.sender];
        require(fromBalance >= amount, "insufficient");
        balanceOf[msg.sender] = fromBalance - amount;
        balanceOf[to] += amount;
        emit Transfer(msg.sender, to, amount);
        return true;
    }

    function approve(address spender, uint256 amount) external returns (bool) {
        _allowances[msg.sender][spender] = amount;
        emit Approval(msg.sender, spender, amount);
        return true;
    }

    function transferFrom(address from, address to, uint256 amount) external returns (bool) {
        _allowances[from][msg.sender] -= amount;
        balanceOf[from] -= amount;
        balanceOf[to] += amount;
        emit Transfer(from, to, amount);
        return true;
    }

    function allowance(address owner, address spender) external view returns (uint256) {
        return _allowances[owner][spender];
    }

    constructor(address _treasury) Ownable(msg.sender) {
        treasury = _treasury;
    }
}
'''


@pytest.fixture
def nft_source():
    """ERC-721 collectible with role-based access and an abstract base declared first."""
    return '''pragma solidity >=0.8.0 <0.9.0;

import "@openzeppelin/contracts/token/ERC721/ERC721.sol";
import "@openzeppelin/contracts/access/AccessControl.sol";

abstract contract Base {
    function version() public pure virtual returns (string memory);
}

contract Collectible is ERC721("Collectible", "CLT"), AccessControl, Base {
    bytes32 public constant MINTER_ROLE = keccak256("MINTER_ROLE");
    uint256 private _nextId;
    mapping(uint256 => string) private _tokenURIs;

    event Minted(address indexed to, uint256 indexed tokenId);

    constructor() {
        _grantRole(DEFAULT_ADMIN_ROLE, msg.sender);
    }

    function mint(address to, string calldata uri) external payable onlyRole(MINTER_ROLE) returns (uint256 id) {
        id = _nextId++;
        _tokenURIs[id] = uri;
        _safeMint(to, id);
        emit Minted(to, id);
    }

    function safeTransferFrom(address from, address to, uint256 tokenId) public override {
        super.safeTransferFrom(from, to, tokenId);
    }

    function version() public pure override returns (string memory) {
        return "1";
    }

    receive() external payable {}
}
'''


@pytest.fixture
def counter_source():
    """Plain contract: no token standard, no access control, no mappings."""
    return '''pragma solidity 0.8.19;

contract Counter {
    uint256 public count;

    function increment() public {
        count += 1;
    }

    function current() public view returns (uint256) {
        return count;
    }
}
'''


@pytest.fixture
def erc20_analysis(erc20_source):
    from solmigrate.core.analyzer import analyze
    return analyze(erc20_source)


@pytest.fixture
def nft_analysis(nft_source):
    from solmigrate.core.analyzer import analyze
    return analyze(nft_source)


@pytest.fixture
def audit_logger(tmp_path):
    from solmigrate.audit.logger import AuditLogger
    return AuditLogger(log_path=str(tmp_path / "audit.jsonl"), enabled=True)


@pytest.fixture
def client(audit_logger):
    """TestClient with a fresh pipeline and a temp audit log per test."""
    from fastapi.testclient import TestClient

    from solmigrate.api.dependencies import get_audit_logger, get_pipeline
    from solmigrate.cache.analysis_cache import AnalysisCache
    from solmigrate.core.pipeline import MigrationPipeline
    from solmigrate.main import app

    pipeline = MigrationPipeline(cache=AnalysisCache(), audit_logger=audit_logger)
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_audit_logger] = lambda: audit_logger
    yield TestClient(app)
    app.dependency_overrides.clear()
