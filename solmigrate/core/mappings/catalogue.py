"""
Static Mapping Catalogue — The fixed EVM → Solana concept table.

Loaded once at import, read many times. Rule modules derive their output from
these templates with ``model_copy(update=...)``; the templates themselves are
frozen and never change.
"""

from __future__ import annotations

from solmigrate.models.analysis_models import Complexity
from solmigrate.models.mapping_models import MappingCategory, MappingRule

CONTRACT_STORAGE = "contract storage"
MAPPING = "mapping(K => V)"
OWNABLE = "address owner (Ownable)"
ACCESS_CONTROL = "AccessControl (roles)"
ERC20 = "ERC-20 token"
ERC721 = "ERC-721 NFT"
EVENT = "Solidity event / emit"
CONSTRUCTOR = "constructor()"

STATIC_RULES: tuple[MappingRule, ...] = (
    MappingRule(
        category=MappingCategory.STATE,
        evm_concept=CONTRACT_STORAGE,
        evm_detail="Persistent key-value storage slots on the EVM",
        evm_type="storage",
        solana_concept="#[account] struct",
        solana_detail="Borsh-serialized struct inside a Program-owned account",
        solana_type="Account<'info, T>",
        rationale=(
            "The EVM gives each contract its own implicit key-value store. Solana has no "
            "implicit storage — all state lives in discrete accounts owned by the program."
        ),
        complexity=Complexity.MEDIUM,
        anchor_snippet=(
            "#[account]\n#[derive(Default)]\npub struct ProgramState {\n"
            "    pub authority: Pubkey,  // 32\n    pub bump: u8,           //  1\n"
            "    // add your fields here\n}"
        ),
        docs_link="https://www.anchor-lang.com/docs/account-types",
    ),
    MappingRule(
        category=MappingCategory.STORAGE,
        evm_concept=MAPPING,
        evm_detail="Solidity hash-map — O(1) key lookup, unbounded entries",
        evm_type="mapping",
        solana_concept="PDA per key",
        solana_detail="One account per entry, seeded by [b\"prefix\", key.as_ref()]",
        solana_type="Account<'info, EntryData>",
        rationale=(
            "Solana has no on-chain hash-map. Each mapping entry becomes its own PDA account. "
            "This enables parallel access and on-chain enumeration via indexers, but requires "
            "knowing the key upfront."
        ),
        complexity=Complexity.HIGH,
        anchor_snippet=(
            "// In Context struct:\n#[account(\n    init_if_needed,\n    payer = payer,\n"
            "    space = 8 + EntryData::LEN,\n    seeds = [b\"entry\", key.as_ref()],\n    bump\n)]\n"
            "pub entry: Account<'info, EntryData>,\n\n#[account]\npub struct EntryData {\n"
            "    pub key: Pubkey,\n    pub value: u64,\n    pub bump: u8,\n}"
        ),
        docs_link="https://www.anchor-lang.com/docs/pdas",
    ),
    MappingRule(
        category=MappingCategory.ACCESS,
        evm_concept=OWNABLE,
        evm_detail="OpenZeppelin Ownable — msg.sender == owner check",
        evm_type="address",
        solana_concept="authority: Pubkey + Signer constraint",
        solana_detail="Store authority in state; validate with has_one or constraint",
        solana_type="Signer<'info>",
        rationale=(
            "There is no msg.sender on Solana. Signer identity must be validated explicitly "
            "in the account Context struct."
        ),
        complexity=Complexity.LOW,
        anchor_snippet=(
            "#[account(\n    mut,\n    has_one = authority @ ErrorCode::Unauthorized\n)]\n"
            "pub state: Account<'info, ProgramState>,\npub authority: Signer<'info>,"
        ),
        docs_link="https://www.anchor-lang.com/docs/account-constraints",
    ),
    MappingRule(
        category=MappingCategory.ACCESS,
        evm_concept=ACCESS_CONTROL,
        evm_detail="bytes32 roles, hasRole / grantRole / revokeRole",
        evm_type="mapping(bytes32 => mapping(address => bool))",
        solana_concept="RoleGrant PDA per (role, user)",
        solana_detail="PDA existence = granted; closing the account = revoke",
        solana_type="Account<'info, RoleGrant>",
        rationale=(
            "Role membership is account-based on Solana. A PDA seeded by [role_id, user_pubkey] "
            "that exists = granted. Deterministic address makes checking cheap."
        ),
        complexity=Complexity.HIGH,
        anchor_snippet=(
            "#[account]\npub struct RoleGrant {\n    pub role:       [u8; 32],\n"
            "    pub grantee:    Pubkey,\n    pub granted_by: Pubkey,\n    pub bump:       u8,\n}\n\n"
            "impl RoleGrant {\n    pub const LEN: usize = 8 + 32 + 32 + 32 + 1;\n}"
        ),
    ),
    MappingRule(
        category=MappingCategory.TOKEN,
        evm_concept=ERC20,
        evm_detail="transfer / approve / transferFrom / balanceOf",
        solana_concept="SPL Token program",
        solana_detail="Shared token program; each holder has an Associated Token Account (ATA)",
        rationale=(
            "You do not rewrite token logic. The SPL Token program (or Token-2022 for "
            "extensions) is a shared on-chain program. Holders interact via ATAs — no custom "
            "program needed for basic fungible tokens."
        ),
        complexity=Complexity.LOW,
        anchor_snippet=(
            "use anchor_spl::token::{self, Token, TokenAccount, Mint};\n"
            "use anchor_spl::associated_token::AssociatedToken;\n\n// In context struct:\n"
            "pub mint: Account<'info, Mint>,\n#[account(\n    associated_token::mint = mint,\n"
            "    associated_token::authority = user,\n)]\npub user_ata: Account<'info, TokenAccount>,"
        ),
        docs_link="https://spl.solana.com/token",
    ),
    MappingRule(
        category=MappingCategory.TOKEN,
        evm_concept=ERC721,
        evm_detail="ownerOf / safeTransferFrom / tokenURI",
        solana_concept="SPL Token (supply=1) + Metaplex",
        solana_detail="NFT = mint with supply 1, decimals 0; metadata via mpl-token-metadata",
        rationale=(
            "Solana NFTs are standardized via Metaplex. tokenURI maps to the metadata URI "
            "field. Use Metaplex SDK for minting and updates."
        ),
        complexity=Complexity.MEDIUM,
        docs_link="https://developers.metaplex.com/token-metadata",
    ),
    MappingRule(
        category=MappingCategory.EVENT,
        evm_concept=EVENT,
        evm_detail="Bloom-filter indexed logs in the block",
        solana_concept="Anchor #[event] + emit!()",
        solana_detail="Emitted via sol_log_data; parsed by Anchor client addEventListener",
        rationale=(
            "Solana has no native log indexing like Ethereum. Anchor events use base64-encoded "
            "CPI logs that clients subscribe to. Off-chain indexers (Helius, Shyft) can index these."
        ),
        complexity=Complexity.LOW,
        anchor_snippet=(
            "#[event]\npub struct MyEvent {\n    pub user:   Pubkey,\n    pub amount: u64,\n}\n\n"
            "// In instruction:\nemit!(MyEvent { user: ctx.accounts.user.key(), amount });"
        ),
    ),
    MappingRule(
        category=MappingCategory.PATTERN,
        evm_concept=CONSTRUCTOR,
        evm_detail="Runs once at deployment; sets initial state",
        solana_concept="initialize instruction",
        solana_detail="An init instruction that creates the state PDA on first call",
        rationale=(
            "Solana programs have no constructors. An initialize instruction protected by an "
            "is_initialized flag serves the same purpose."
        ),
        complexity=Complexity.LOW,
        anchor_snippet=(
            "pub fn initialize(ctx: Context<Initialize>, bump: u8) -> Result<()> {\n"
            "    let s = &mut ctx.accounts.state;\n"
            "    require!(!s.is_initialized, ErrorCode::AlreadyInitialized);\n"
            "    s.authority = ctx.accounts.authority.key();\n    s.bump = bump;\n"
            "    s.is_initialized = true;\n    Ok(())\n}"
        ),
    ),
    MappingRule(
        category=MappingCategory.PATTERN,
        evm_concept="require(condition, \"msg\")",
        evm_detail="Reverts transaction with error string on false",
        solana_concept="require!(condition, ErrorCode::Variant)",
        solana_detail="#[error_code] enum + require! macro",
        rationale=(
            "Anchor's require! macro maps directly to require(). Error codes are strongly "
            "typed enums — no stringly-typed messages at runtime."
        ),
        complexity=Complexity.LOW,
        anchor_snippet=(
            "#[error_code]\npub enum ErrorCode {\n    #[msg(\"Unauthorized\")]\n"
            "    Unauthorized = 6000,\n    #[msg(\"Amount must be > 0\")]\n    InvalidAmount = 6001,\n}\n\n"
            "// Usage:\nrequire!(amount > 0, ErrorCode::InvalidAmount);"
        ),
    ),
    MappingRule(
        category=MappingCategory.PATTERN,
        evm_concept="block.timestamp",
        evm_detail="Unix timestamp of current block",
        solana_concept="Clock::get()?.unix_timestamp",
        solana_detail="Must request Clock sysvar — pass as account or via Clock::get()",
        rationale=(
            "Solana's wall-clock time is available via the Clock sysvar. Note: Solana slot "
            "time varies (~400ms) and is not as precise as Ethereum block time."
        ),
        complexity=Complexity.LOW,
        anchor_snippet=(
            "let clock = Clock::get()?;\nlet now = clock.unix_timestamp; // i64 Unix seconds\n"
            "require!(now >= state.unlock_at, ErrorCode::TooEarly);"
        ),
    ),
    MappingRule(
        category=MappingCategory.PATTERN,
        evm_concept="ReentrancyGuard / nonReentrant",
        evm_detail="Prevents re-entrant calls within same transaction",
        solana_concept="Largely not needed — Solana runtime prevents most reentrancy",
        solana_detail="Cross-program invocations (CPIs) are validated at the runtime level",
        rationale=(
            "Solana's account model and runtime design prevent most classic reentrancy "
            "attacks. However, carefully audit CPI flows and avoid re-using writable accounts "
            "across CPIs."
        ),
        complexity=Complexity.LOW,
    ),
    MappingRule(
        category=MappingCategory.PATTERN,
        evm_concept="payable / msg.value",
        evm_detail="ETH sent with the transaction",
        solana_concept="SOL transfer via SystemProgram::transfer",
        solana_detail="Debit payer account explicitly; no implicit value attachment",
        rationale=(
            "SOL transfers are explicit on Solana. Use SystemProgram::transfer in a CPI to "
            "move lamports between accounts."
        ),
        complexity=Complexity.MEDIUM,
        anchor_snippet=(
            "anchor_lang::system_program::transfer(\n    CpiContext::new(\n"
            "        ctx.accounts.system_program.to_account_info(),\n"
            "        anchor_lang::system_program::Transfer {\n"
            "            from: ctx.accounts.payer.to_account_info(),\n"
            "            to:   ctx.accounts.vault.to_account_info(),\n        },\n    ),\n"
            "    amount_lamports,\n)?;"
        ),
    ),
)

_BY_CONCEPT: dict[str, MappingRule] = {rule.evm_concept: rule for rule in STATIC_RULES}


def template(evm_concept: str) -> MappingRule:
    """Look up a catalogue entry by its EVM concept. Raises KeyError if absent."""
    return _BY_CONCEPT[evm_concept]


def pattern_rules() -> list[MappingRule]:
    return [rule for rule in STATIC_RULES if rule.category == MappingCategory.PATTERN]
