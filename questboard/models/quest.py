"""Quest catalog models"""
from pydantic import BaseModel, ConfigDict, Field


class Quest(BaseModel):
    """A predefined, point-valued completable action"""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    points: int = Field(gt=0)
    category: str
    icon: str = "🎯"


DEFAULT_QUESTS: tuple[Quest, ...] = (
    Quest(id="prospecting-call", title="Prospecting call", points=5, category="Sales", icon="📞"),
    Quest(id="book-meeting", title="Book a meeting", points=15, category="Sales", icon="📅"),
    Quest(id="send-proposal", title="Send proposal/quote", points=20, category="Sales", icon="📨"),
    Quest(id="close-deal", title="Close a deal", points=75, category="Sales", icon="🏁"),
    Quest(id="linkedin-post", title="LinkedIn post", points=10, category="Marketing", icon="📝"),
    Quest(id="meaningful-comments", title="5 meaningful comments", points=5, category="Marketing", icon="💬"),
    Quest(id="email-newsletter", title="Email newsletter", points=20, category="Marketing", icon="📧"),
    Quest(id="source-candidates", title="Source 5 candidates", points=10, category="Recruitment", icon="🧲"),
    Quest(id="screen-candidate", title="Screen candidate", points=10, category="Recruitment", icon="🗣️"),
    Quest(id="client-intake-call", title="Client intake call", points=15, category="Recruitment", icon="🎧"),
    Quest(id="candidate-submitted", title="Candidate submitted to client", points=15, category="Recruitment", icon="📤"),
    Quest(id="offer-accepted", title="Offer accepted", points=100, category="Recruitment", icon="🤝"),
    Quest(id="add-crm-leads", title="Add 10 leads to CRM", points=10, category="Ops", icon="🗂️"),
    Quest(id="update-pipeline", title="Update pipeline", points=5, category="Ops", icon="♻️"),
)


def default_quests() -> list[Quest]:
    """Catalog snapshot for a fresh profile"""
    return list(DEFAULT_QUESTS)


def categories(quests: list[Quest]) -> list[str]:
    """Distinct categories in catalog order"""
    seen: list[str] = []
    for quest in quests:
        if quest.category not in seen:
            seen.append(quest.category)
    return seen
