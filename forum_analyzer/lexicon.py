"""Fixed vocabularies used by the scorers.

Everything here is a constant. Scorers receive these by reference at
construction time, so tests can swap in smaller vocabularies.
"""

from forum_analyzer.models import ProposalType

# Terms that indicate a discussion may warrant a governance proposal
PROPOSAL_KEYWORDS: tuple[str, ...] = (
    "proposal", "propose", "governance", "vote", "voting", "decision",
    "treasury", "fund", "funding", "budget", "allocation", "grant",
    "improvement", "upgrade", "change", "modify", "update", "implement",
    "strategy", "policy", "protocol", "parameter", "framework",
)

# Terms that mark a sentence as important
IMPORTANCE_KEYWORDS: tuple[str, ...] = (
    "urgent", "important", "critical", "crucial", "significant",
    "essential", "necessary", "required", "needed", "priority",
)

# Classifier buckets. Iteration order is the tie-break order.
TYPE_KEYWORDS: dict[ProposalType, tuple[str, ...]] = {
    ProposalType.GOVERNANCE: ("governance", "vote", "proposal", "policy"),
    ProposalType.TREASURY: ("treasury", "fund", "budget", "grant"),
    ProposalType.TECHNICAL: ("technical", "protocol", "code", "implementation"),
    ProposalType.SOCIAL: ("community", "social", "communication", "culture"),
}

# AFINN-style word polarity, integer weights in [-5, 5]
SENTIMENT_BOUNDS: tuple[float, float] = (-5.0, 5.0)

SENTIMENT_LEXICON: dict[str, int] = {
    "abandon": -2, "abandoned": -2, "abuse": -3, "accept": 1, "accepted": 1,
    "accomplish": 2, "achieve": 2, "agree": 1, "agreed": 1, "alarming": -2,
    "amazing": 4, "anger": -3, "angry": -3, "annoyed": -2, "annoying": -2,
    "anxious": -2, "appreciate": 2, "appreciated": 2, "approval": 2,
    "approve": 2, "approved": 2, "attack": -1, "awesome": 4, "awful": -3,
    "bad": -3, "benefit": 2, "benefits": 2, "best": 3, "better": 2,
    "blame": -2, "block": -1, "blocked": -2, "boring": -3, "broken": -1,
    "care": 2, "careful": 2, "chaos": -2, "clear": 1, "collapse": -2,
    "concerned": -2, "confidence": 2, "confident": 2, "confused": -2,
    "confusing": -2, "cool": 1, "corrupt": -3, "costly": -2, "crisis": -3,
    "critical": -2, "damage": -3, "danger": -2, "dangerous": -2, "dead": -3,
    "delay": -1, "delayed": -1, "disagree": -2, "disappointed": -2,
    "disappointing": -2, "disaster": -2, "easy": 1, "effective": 2,
    "efficient": 2, "encourage": 2, "enjoy": 2, "error": -2, "excellent": 3,
    "excited": 3, "exciting": 3, "fail": -2, "failed": -2, "failure": -2,
    "fair": 2, "fantastic": 4, "fear": -2, "fine": 2, "fix": 1, "fraud": -4,
    "free": 1, "fun": 4, "good": 3, "great": 3, "growth": 2, "happy": 3,
    "harm": -2, "hate": -3, "help": 2, "helpful": 2, "hope": 2,
    "hopeful": 2, "hurt": -2, "ignore": -1, "important": 2, "improve": 2,
    "improved": 2, "improvement": 2, "innovative": 2, "interesting": 2,
    "issue": -1, "kill": -3, "lose": -3, "loss": -3, "love": 3, "mess": -2,
    "nice": 3, "no": -1, "outstanding": 5, "pain": -2, "perfect": 3,
    "poor": -2, "positive": 2, "problem": -2, "problems": -2, "progress": 2,
    "promising": 1, "protect": 1, "rejected": -1, "risk": -2, "risks": -2,
    "risky": -2, "sad": -2, "safe": 1, "scam": -2, "secure": 2, "strong": 2,
    "stupid": -2, "success": 2, "successful": 3, "support": 2,
    "supportive": 2, "terrible": -3, "thank": 2, "thanks": 2, "threat": -2,
    "trust": 1, "ugly": -3, "unfair": -2, "urgent": -1, "useful": 2,
    "useless": -2, "vulnerable": -2, "waste": -1, "win": 4, "wonderful": 4,
    "worried": -3, "worry": -3, "worse": -3, "worst": -3, "wrong": -2,
    "yes": 1,
}

# Cue words for the derived sequences of an analysis
OPINION_CUES: frozenset[str] = frozenset({
    "think", "believe", "feel", "agree", "disagree", "opinion", "concern",
    "concerned", "prefer", "support", "oppose", "worry", "worried",
})

SOLUTION_CUES: frozenset[str] = frozenset({
    "should", "propose", "proposed", "suggest", "recommend", "could",
    "implement", "introduce", "allocate", "increase", "reduce", "create",
    "add", "replace",
})

STAKEHOLDER_TERMS: tuple[str, ...] = (
    "community", "delegates", "holders", "developers", "contributors",
    "team", "council", "members", "users", "validators", "stakers",
)
