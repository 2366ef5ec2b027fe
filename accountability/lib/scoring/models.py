"""
Pydantic models for the accountability scoring engine.

Input records mirror the upstream JSON snapshots (vote rosters, position
lists, trade lists, finance summaries, disclosure filings) and accept both
the upstream camelCase keys and snake_case names. Every model is frozen:
scoring calls build new result objects and never amend their inputs.

Usage:
    from accountability.lib.scoring.models import StockTrade

    trade = StockTrade.model_validate({
        "ticker": "NVDA",
        "tradedDate": "2024-03-01",
        "filedDate": "2024-04-20",
        "transaction": "Purchase",
        "tradeSizeUsd": 75000,
        "excessReturn": 12.4,
    })
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


RECORD_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

# NaN would slip past the sum check
WEIGHTS_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="ignore", allow_inf_nan=False)


# ============================================================================
# Enums
# ============================================================================


class BeneficiaryGroup(str, Enum):
    """Economic or demographic group affected by legislation"""

    CORPORATIONS = "corporations"
    WEALTHY = "wealthy"
    MIDDLE_CLASS = "middle_class"
    WORKING_CLASS = "working_class"
    LOW_INCOME = "low_income"
    WORKERS = "workers"
    CONSUMERS = "consumers"
    ENVIRONMENT = "environment"
    MILITARY_DEFENSE = "military_defense"
    HEALTHCARE_INDUSTRY = "healthcare_industry"
    TECH_INDUSTRY = "tech_industry"
    FOSSIL_FUEL_INDUSTRY = "fossil_fuel_industry"
    WALL_STREET = "wall_street"
    SMALL_BUSINESS = "small_business"
    FARMERS = "farmers"
    SENIORS = "seniors"
    STUDENTS = "students"
    VETERANS = "veterans"
    IMMIGRANTS = "immigrants"
    GENERAL_PUBLIC = "general_public"


class Impact(str, Enum):
    """Direction of a legislative effect on a group"""

    BENEFITS = "benefits"
    HARMS = "harms"
    MIXED = "mixed"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PublicSentiment(str, Enum):
    """Aggregate public-interest reading of a classification"""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class PublicBenefit(str, Enum):
    """Whether a Yea vote serves the broad public interest"""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    MIXED = "mixed"


class VotePosition(str, Enum):
    """Roll-call vote cast by an official"""

    YEA = "Yea"
    NAY = "Nay"
    NOT_VOTING = "Not Voting"
    PRESENT = "Present"


class TransactionType(str, Enum):
    """Disclosed stock transaction type"""

    PURCHASE = "Purchase"
    SALE = "Sale"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FlagType(str, Enum):
    """Trade risk heuristics"""

    UNUSUAL_RETURN = "unusual_return"
    LARGE_TRADE = "large_trade"
    RAPID_TRADING = "rapid_trading"
    SUSPICIOUS_TIMING = "suspicious_timing"
    LATE_DISCLOSURE = "late_disclosure"


class SuspicionLevel(str, Enum):
    """Per-official trading suspicion bucket ('none' only appears in legacy summaries)"""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LetterGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


# ============================================================================
# Legislative records
# ============================================================================


class LegislativeText(BaseModel):
    """Bill, vote or promise text handed to the classifiers"""

    model_config = RECORD_CONFIG

    id: str = Field(..., description="Bill, vote or promise identifier (e.g. 'H.R. 1')")
    title: str = Field("", description="Short title")
    description: str = Field("", description="Long description or summary")
    category: Optional[str] = Field(None, description="Canonical subject category")


class BeneficiaryImpact(BaseModel):
    """One (group, impact) pair emitted by the beneficiary classifier"""

    model_config = RECORD_CONFIG

    group: BeneficiaryGroup
    impact: Impact
    confidence: Confidence = Confidence.MEDIUM
    reason: str = ""


class ClassificationResult(BaseModel):
    """Who is helped or harmed by a piece of legislation"""

    model_config = RECORD_CONFIG

    summary: str = Field("", description="Description, or title when no description")
    beneficiaries: List[BeneficiaryImpact] = Field(default_factory=list)
    public_sentiment: PublicSentiment = Field(
        PublicSentiment.UNKNOWN, alias="publicSentiment"
    )


class KeyVote(BaseModel):
    """Roll-call vote with a fixed public-benefit polarity"""

    model_config = RECORD_CONFIG

    id: str = Field(..., description="Roll-call identifier")
    bill: Optional[str] = Field(None, description="Bill number voted on")
    title: str = ""
    description: str = ""
    chamber: Optional[str] = None
    category: Optional[str] = Field(None, description="Canonical subject category")
    yea_count: int = Field(0, ge=0)
    nay_count: int = Field(0, ge=0)
    result: Optional[str] = None
    public_benefit: Optional[PublicBenefit] = Field(None, alias="publicBenefit")
    pro_public_benefit: Optional[bool] = Field(
        None,
        alias="proPublicBenefit",
        description="Explicit polarity; overrides public_benefit when set",
    )
    votes: Dict[str, str] = Field(
        default_factory=dict, description="Official id -> Yea/Nay/Not Voting/Present"
    )
    beneficiaries: List[BeneficiaryImpact] = Field(default_factory=list)

    @property
    def is_pro_public(self) -> bool:
        """True when a Yea vote is the public-interest vote."""
        if self.pro_public_benefit is not None:
            return self.pro_public_benefit
        return self.public_benefit == PublicBenefit.POSITIVE


# ============================================================================
# Positions
# ============================================================================


class Position(BaseModel):
    """An official's stated stance on a policy topic"""

    model_config = RECORD_CONFIG

    topic: str
    stance: str = Field(..., description="e.g. 'Strongly Supports', 'Opposes', 'Neutral'")
    intensity: int = Field(3, ge=1, le=5, description="1 (strongly opposes) .. 5 (strongly supports)")
    quotes: List[str] = Field(default_factory=list)
    votes: List[str] = Field(default_factory=list, description="Referenced bill identifiers")

    @model_validator(mode="before")
    @classmethod
    def default_intensity_from_stance(cls, data):
        if isinstance(data, dict) and data.get("intensity") is None and data.get("stance"):
            from accountability.lib.scoring.positions import normalize_stance, stance_to_intensity

            data = dict(data)
            data["intensity"] = stance_to_intensity(normalize_stance(data["stance"]))
        return data

    @model_validator(mode="after")
    def check_intensity_polarity(self):
        lowered = self.stance.lower()
        if ("supports" in lowered or "favors" in lowered) and self.intensity < 3:
            raise ValueError(f"Intensity {self.intensity} contradicts supporting stance '{self.stance}'")
        if "opposes" in lowered and self.intensity > 3:
            raise ValueError(f"Intensity {self.intensity} contradicts opposing stance '{self.stance}'")
        return self


# ============================================================================
# Trading
# ============================================================================


class StockTrade(BaseModel):
    """A disclosed stock transaction"""

    model_config = RECORD_CONFIG

    ticker: str
    traded_date: datetime = Field(..., alias="tradedDate")
    filed_date: Optional[datetime] = Field(None, alias="filedDate")
    transaction: TransactionType
    trade_size_usd: float = Field(0.0, alias="tradeSizeUsd")
    excess_return: Optional[float] = Field(None, alias="excessReturn")

    @field_validator("transaction", mode="before")
    @classmethod
    def normalize_transaction(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered.startswith("sale"):
                return TransactionType.SALE
            if lowered.startswith("purchase"):
                return TransactionType.PURCHASE
        return value

    @field_validator("traded_date", "filed_date")
    @classmethod
    def drop_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Aware and naive dates must stay comparable
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TradeFlag(BaseModel):
    """One triggered risk heuristic"""

    model_config = RECORD_CONFIG

    type: FlagType
    severity: Severity
    description: str
    return_pct: Optional[float] = None
    amount: Optional[float] = None
    trade_count: Optional[int] = None
    pattern: Optional[str] = None
    days_late: Optional[int] = None


class ScoredTrade(BaseModel):
    """A trade annotated with its risk flags"""

    model_config = RECORD_CONFIG

    trade: StockTrade
    flags: List[TradeFlag] = Field(default_factory=list)
    risk_score: int = Field(0, ge=0, le=10)

    @property
    def is_flagged(self) -> bool:
        return len(self.flags) > 0


class TradingSummary(BaseModel):
    """Per-official trading risk summary"""

    model_config = RECORD_CONFIG

    total_trades: int = 0
    flagged_trades: int = 0
    flag_rate: float = 0.0
    total_risk_score: int = 0
    avg_risk_per_trade: float = 0.0
    avg_excess_return: Optional[float] = None
    suspicious_patterns: Dict[str, int] = Field(default_factory=dict)
    overall_suspicion_level: Optional[SuspicionLevel] = None


class TradeRiskReport(BaseModel):
    model_config = RECORD_CONFIG

    trades: List[ScoredTrade] = Field(default_factory=list)
    summary: TradingSummary


# ============================================================================
# Finance and disclosures
# ============================================================================


class FinanceData(BaseModel):
    """Campaign-finance summary percentages (0-100)"""

    model_config = RECORD_CONFIG

    pac_percentage: Optional[float] = None
    large_donor_percentage: Optional[float] = None


class DisclosureFiling(BaseModel):
    """A financial disclosure filing"""

    model_config = RECORD_CONFIG

    year: int
    filing_date: Optional[str] = Field(None, alias="filingDate")


# ============================================================================
# Alignment
# ============================================================================


class AlignmentResult(BaseModel):
    """Stated position vs. votes in its categories"""

    model_config = RECORD_CONFIG

    position: Position
    relevant_votes: int = 0
    aligned_votes: int = 0
    opposed_votes: int = 0
    alignment_score: Optional[int] = Field(None, description="0-100, None if no countable votes")


class MemberAlignmentSummary(BaseModel):
    model_config = RECORD_CONFIG

    official_id: str
    total_positions: int = 0
    positions_with_votes: int = 0
    overall_alignment_score: Optional[int] = None
    category_scores: Dict[str, int] = Field(default_factory=dict)
    results: List[AlignmentResult] = Field(default_factory=list)


# ============================================================================
# Grading
# ============================================================================


class GradeWeights(BaseModel):
    """Multi-factor grade weights (must sum to 1.0)"""

    model_config = WEIGHTS_CONFIG

    voting_weight: float = Field(0.25, alias="votingWeight")
    donor_weight: float = Field(0.25, alias="donorWeight")
    stock_weight: float = Field(0.25, alias="stockWeight")
    disclosure_weight: float = Field(0.25, alias="disclosureWeight")

    def total(self) -> float:
        return self.voting_weight + self.donor_weight + self.stock_weight + self.disclosure_weight


class ScoreBreakdown(BaseModel):
    model_config = RECORD_CONFIG

    voting_score: float
    donor_score: float
    stock_score: float
    disclosure_score: float


class GradeResult(BaseModel):
    """Multi-factor accountability grade"""

    model_config = RECORD_CONFIG

    official_id: str
    overall: float
    letter: LetterGrade
    breakdown: ScoreBreakdown
    weights: GradeWeights


class VotingRecord(BaseModel):
    """Aggregate key-vote counts used by the legacy grader"""

    model_config = RECORD_CONFIG

    key_votes_participated: int = 0
    key_votes_total: int = 0
    votes_with_party: int = 0
    votes_against_public_interest: int = 0


class DisclosureCompliance(BaseModel):
    model_config = RECORD_CONFIG

    filings_count: int = 0
    expected_filings: int = 0
    late_filings: int = 0
    missing_filings: int = 0


class MemberData(BaseModel):
    """Legacy grader input; every factor except donor data is optional"""

    model_config = RECORD_CONFIG

    pac_percentage: Optional[float] = None
    large_donor_percentage: Optional[float] = None
    voting_record: Optional[VotingRecord] = None
    trading_summary: Optional[TradingSummary] = None
    disclosure_compliance: Optional[DisclosureCompliance] = None


class LegacyGradeWeights(BaseModel):
    model_config = WEIGHTS_CONFIG

    donor: float = 0.25
    voting: float = 0.25
    trading: float = 0.25
    disclosure: float = 0.25

    def total(self) -> float:
        return self.donor + self.voting + self.trading + self.disclosure


class LegacyScoreBreakdown(BaseModel):
    model_config = RECORD_CONFIG

    donor_score: float
    voting_score: float
    trading_score: float
    disclosure_score: float


class GradeExplanation(BaseModel):
    model_config = RECORD_CONFIG

    donor: str
    voting: str
    trading: str
    disclosure: str


class LegacyGradeResult(BaseModel):
    model_config = RECORD_CONFIG

    overall: float
    letter: LetterGrade
    breakdown: LegacyScoreBreakdown
    explanation: GradeExplanation


# ============================================================================
# Pipeline output
# ============================================================================


class MemberScorecard(BaseModel):
    """Everything derived for one official in a single pass"""

    model_config = RECORD_CONFIG

    official_id: str
    alignment: MemberAlignmentSummary
    trade_report: TradeRiskReport
    grade: GradeResult
