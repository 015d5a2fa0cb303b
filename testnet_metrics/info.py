"""Static content of the "Testnet Metrics" information dialog."""

from typing import List, Optional

from pydantic import BaseModel


class Link(BaseModel):
    text: str
    href: str


class InfoParagraph(BaseModel):
    heading: Optional[str] = None
    before: str
    link: Optional[Link] = None
    after: str = ""


class InfoDialog(BaseModel):
    title: str
    description: List[InfoParagraph]
    faq: List[InfoParagraph]


INFO_DIALOG = InfoDialog(
    title="Testnet Metrics",
    description=[
        InfoParagraph(
            before="The data displayed in this dashboard is collected from Codex nodes that use the ",
            link=Link(text="Codex CLI", href="https://github.com/codex-storage/cli"),
            after=" for running a Codex alturistic node in the testnet.",
        ),
        InfoParagraph(
            before=(
                "Users agree to a privacy disclaimer before using the Codex CLI and the data collected will be "
                "used to understand the testnet statistics and help troubleshooting users who face difficulty "
                "in getting onboarded to Codex."
            ),
        ),
    ],
    faq=[
        InfoParagraph(
            heading="Don't wish to provide data?",
            before=(
                "You can still run a Codex node without providing any data. To do this, please follow the "
                "steps mentioned in the "
            ),
            link=Link(text="Codex documentation", href="https://docs.codex.storage/"),
            after=" which does not use the Codex CLI.",
        ),
        InfoParagraph(
            heading="Is there an incentive to run a Codex node?",
            before=(
                "Codex is currently in testnet and it is not incentivized. However, in the future, Codex may be "
                "incentivized as per the roadmap. But please bear in mind that no incentives are promised for "
                "testnet node operators."
            ),
        ),
        InfoParagraph(
            heading="I have a question or suggestion",
            before="The best way to get in touch with us is to join the ",
            link=Link(text="Codex discord", href="https://discord.gg/codex-storage"),
            after=" and ask your question in the #support channel.",
        ),
    ],
)
