from typing import List
from app.schemas.chat import ResponseRule, PanelTag

GREETING = "What can I help you build today? 3D asset, scene, or something else?"
FALLBACK_REPLY = "I'll help with that. What else would you like to configure?"

# El orden importa: gana la primera regla que encaja.
RESPONSE_TABLE: List[ResponseRule] = [
    ResponseRule(
        triggers=[r"build|robot|game"],
        reply="That sounds cool! Is this for a video game, VR, or something else?",
    ),
    ResponseRule(
        triggers=[r"game"],
        reply="Great! Would you like me to help set up your Sci-Fi Robot project?",
    ),
    ResponseRule(
        triggers=[r"yes|setup"],
        reply="What is the timeline for the project?",
    ),
    ResponseRule(
        triggers=[r"month|week|timeline"],
        reply="Any milestones or workstreams to divide the project into?",
    ),
    ResponseRule(
        triggers=[r"milestone|object|texture|animation"],
        reply=(
            "Here's your project setup with the milestones you mentioned. "
            "You can see the timeline visualization on the right."
        ),
        ui=PanelTag.PROJECT_SETUP,
    ),
    ResponseRule(
        triggers=[r"team|teammate|member"],
        reply=(
            "I've added your team members to the project dashboard. "
            "Would you like to add more details about their roles?"
        ),
        ui=PanelTag.TEAM_SETUP,
    ),
    ResponseRule(
        triggers=[r"tool|compare|software"],
        reply="Here's a comparison of common 3D modeling tools that could be useful for your project.",
        ui=PanelTag.TOOLS_COMPARISON,
    ),
    ResponseRule(
        triggers=[r"file|folder|upload"],
        reply="I've opened the file manager. You can organize your assets into folders there.",
        ui=PanelTag.FILE_MANAGEMENT,
    ),
    ResponseRule(
        triggers=[r"version|history|revision"],
        reply="Here's the version history for your files. Every new version is tracked with its changelog.",
        ui=PanelTag.VERSION_CONTROL,
    ),
    ResponseRule(
        triggers=[r"progress|graph|analytics|chart"],
        reply="Here's how the project is progressing, broken down by task status and milestones.",
        ui=PanelTag.PROGRESS_GRAPHS,
    ),
    ResponseRule(
        triggers=[r"import|export|format"],
        reply="You can import existing assets or export your work in common 3D formats from the panel on the right.",
        ui=PanelTag.IMPORT_EXPORT,
    ),
]

FALLBACK_RULE = ResponseRule(triggers=[], reply=FALLBACK_REPLY)
