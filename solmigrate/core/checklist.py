"""
Migration Checklist — Sectioned, prioritised migration tasks derived from the analysis.

Automated items (things this tool already did) start checked. The returned
Checklist is also the JSON export payload.
"""

from __future__ import annotations

import time
from itertools import count

from solmigrate.models.analysis_models import AnalysisResult, Complexity
from solmigrate.models.anchor_models import AnchorSkeleton
from solmigrate.models.checklist_models import Checklist, ChecklistItem, Priority, SectionProgress

CRITICAL, HIGH, MEDIUM, LOW = Priority.CRITICAL, Priority.HIGH, Priority.MEDIUM, Priority.LOW

MAX_INSTRUCTION_ITEMS = 5

# (text, priority, detail) per section, independent of the analysed contract
_TESTING = [
    ("Write unit test for initialize instruction", CRITICAL, None),
    ("Write tests for all public instruction handlers", CRITICAL, None),
    ("Test PDA derivation and account creation/closure", HIGH, None),
    ("Test unauthorized access rejection", HIGH, None),
    ("`anchor test` — all tests passing on localnet", CRITICAL, None),
    (
        "Use LiteSVM or Mollusk for fast in-process unit tests",
        MEDIUM,
        "Much faster than spinning up a test-validator. Great for unit-testing individual instructions.",
    ),
    ("Integration test against devnet with real token accounts", HIGH, None),
]

_SECURITY = [
    ("Verify all account owner checks (program owns PDAs)", CRITICAL, None),
    ("Validate all account constraints in Context structs", CRITICAL, None),
    ("Ensure no account is writable that should be read-only", CRITICAL, None),
    ("Check for integer overflow — use checked_add, checked_mul", CRITICAL, None),
    ("Signer spoofing prevention — all privileged callers use Signer<'info>", CRITICAL, None),
    ("Audit CPI flows — verify callee program IDs match expected", HIGH, None),
    ("Review compute unit usage — add ComputeBudget instruction if >200k CUs", MEDIUM, None),
    ("Run `anchor idl --out idl.json` and review for unintended exposure", MEDIUM, None),
    ("Request peer code review or professional audit before mainnet", HIGH, None),
]

_TOKEN_MIGRATION = [
    (
        "Install @wormhole-foundation/sdk",
        CRITICAL,
        "npm install @wormhole-foundation/sdk @wormhole-foundation/sdk-evm @wormhole-foundation/sdk-solana",
    ),
    ("Initialize Wormhole SDK: wormhole('Testnet', [evm, solana])", CRITICAL, None),
    ("Snapshot all EVM token holders and balances", CRITICAL, None),
    ("Verify total supply matches sum of all holder balances", CRITICAL, None),
    ("Collect EVM address → Solana wallet mapping from holders", CRITICAL, None),
    ("Deploy and test NTT Manager + Transceiver on testnet (Sepolia → devnet)", HIGH, None),
    ("Run end-to-end NTT transfer test using TypeScript SDK", HIGH, None),
    (
        "Apply to Sunrise for liquidity routing (sunrisedefi.com)",
        HIGH,
        "Sunrise is the canonical gateway for new assets entering Solana with native liquidity.",
    ),
    ("Distribute SPL tokens to holders on mainnet", CRITICAL, None),
    ("Revoke mint authority after full distribution (fixed supply)", MEDIUM, None),
    ("Deploy liquidity pool on Orca or Raydium", MEDIUM, None),
]

_DEPLOYMENT = [
    ("`anchor deploy` to devnet — verify program ID matches Anchor.toml", CRITICAL, None),
    ("Run full test suite against devnet deployment", CRITICAL, None),
    ("Verify program upgrade authority wallet is secure", HIGH, None),
    ("`anchor deploy` to mainnet-beta", CRITICAL, None),
    ("Verify on Solana Explorer (explorer.solana.com)", HIGH, None),
    ("Publish IDL on-chain: `anchor idl init <programId>`", MEDIUM, None),
    ("Update frontend / SDK with mainnet program ID", CRITICAL, None),
    ("Monitor for errors in first 48 hours using Helius / Shyft alerts", HIGH, None),
]


class _Builder:
    def __init__(self) -> None:
        self.items: list[ChecklistItem] = []
        self._ids = count(1)

    def add(
        self,
        section: str,
        text: str,
        priority: Priority,
        detail: str | None = None,
        automated: bool = False,
    ) -> None:
        self.items.append(
            ChecklistItem(
                id=f"chk-{next(self._ids)}",
                section=section,
                text=text,
                priority=priority,
                detail=detail,
                automated=automated,
                checked=automated,
            )
        )

    def add_all(self, section: str, entries: list[tuple[str, Priority, str | None]]) -> None:
        for text, priority, detail in entries:
            self.add(section, text, priority, detail)


def build_checklist_items(
    analysis: AnalysisResult, skeleton: AnchorSkeleton | None = None
) -> list[ChecklistItem]:
    b = _Builder()

    # ── Analysis ──
    b.add("Analysis", "Parse Solidity source code", CRITICAL, automated=True)
    b.add("Analysis", f"Detected token standard: {analysis.token_standard}", CRITICAL, automated=True)
    b.add("Analysis", "Review all state variable → Solana account field mappings", HIGH)
    b.add(
        "Analysis",
        "Identify all external contract calls / CPIs required",
        HIGH,
        "EVM external calls become Anchor CPIs. Each called program must be included in the Context struct.",
    )
    b.add("Analysis", "Document business logic that must be preserved exactly", CRITICAL)
    b.add(
        "Analysis",
        f"Contract complexity: {analysis.complexity.value} ({analysis.line_count} lines)",
        HIGH if analysis.complexity == Complexity.HIGH else MEDIUM,
        automated=True,
    )
    if analysis.has_mappings:
        b.add(
            "Analysis",
            f"Design PDA seed scheme for {len(analysis.mapping_variables)} mapping(s)",
            CRITICAL,
            "Each mapping entry = 1 PDA. Seeds must be unique per entry. Store the bump in the account.",
        )
    if analysis.errors:
        b.add(
            "Analysis",
            f"Resolve {len(analysis.errors)} source analysis warning(s) — results may be partial",
            HIGH,
            analysis.errors[0],
        )

    # ── Program Dev ──
    b.add(
        "Program Dev",
        "Anchor skeleton generated (lib.rs, Anchor.toml, Cargo.toml, tests)",
        HIGH,
        automated=skeleton is not None and bool(skeleton.files),
    )
    b.add("Program Dev", "Implement all instruction handlers (replace TODO blocks in lib.rs)", CRITICAL)
    b.add(
        "Program Dev",
        "Verify account space (LEN) for every #[account] struct",
        CRITICAL,
        "Under-allocated accounts fail at init. Add 64+ bytes headroom. Anchor discriminator = 8 bytes.",
    )
    b.add("Program Dev", "Add typed error codes for all business rule violations", HIGH)
    b.add("Program Dev", "Implement Anchor #[event] + emit!() for all Solidity events", MEDIUM)
    b.add("Program Dev", "`anchor build` — zero compiler errors or warnings", CRITICAL)

    if skeleton is not None:
        for instruction in skeleton.instructions[:MAX_INSTRUCTION_ITEMS]:
            b.add("Program Dev", f"Implement instruction: {instruction}", CRITICAL)

    if analysis.is_erc20:
        b.add("Program Dev", "Deploy SPL Token mint (match ERC-20 decimals)", CRITICAL)
        b.add("Program Dev", "Integrate anchor_spl::token for transfer / mint / burn", HIGH)
        b.add("Program Dev", "Test Associated Token Account (ATA) creation flow", HIGH)
    if analysis.is_erc721:
        b.add("Program Dev", "Integrate Metaplex Token Metadata for NFT metadata URI", HIGH)
        b.add("Program Dev", "Implement mint-per-NFT with supply=1, decimals=0", HIGH)
    if analysis.has_ownable or analysis.has_access_control:
        b.add(
            "Program Dev",
            "Implement authority / role checks in all privileged instructions",
            CRITICAL,
            "Use `has_one = authority` or "
            "`constraint = authority.key() == state.authority @ ErrorCode::Unauthorized`.",
        )

    b.add_all("Testing", _TESTING)
    b.add_all("Security", _SECURITY)
    if analysis.is_erc20 or analysis.is_erc721:
        b.add_all("Token Migration", _TOKEN_MIGRATION)
    b.add_all("Deployment", _DEPLOYMENT)

    return b.items


def build_checklist(
    analysis: AnalysisResult, skeleton: AnchorSkeleton | None = None
) -> Checklist:
    """Build the full checklist with section progress and export metadata."""
    items = build_checklist_items(analysis, skeleton)

    sections: dict[str, SectionProgress] = {}
    for item in items:
        progress = sections.setdefault(item.section, SectionProgress(section=item.section, done=0, total=0))
        progress.total += 1
        progress.done += int(item.checked)

    done = sum(1 for item in items if item.checked)
    main = analysis.main_contract
    return Checklist(
        contract=main.name if main else "Unknown",
        token_standard=analysis.token_standard,
        complexity=analysis.complexity.value,
        generated_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        items=items,
        sections=list(sections.values()),
        progress=round(done / len(items) * 100) if items else 0,
    )
