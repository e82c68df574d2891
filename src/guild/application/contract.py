CONTRACT_VERSION = "1.0.0"

COMMAND_INTENTS = (
    "start_quest",
    "upgrade_quest",
    "unlock_quest",
    "hire_adventurer",
    "assign_adventurer",
    "assign_first_available",
    "give_gift",
    "advance",
    "save",
    "export_save",
    "import_save",
)

QUERY_INTENTS = (
    "status_view",
    "quest_board_view",
    "active_quests_view",
    "roster_view",
    "recruitment_view",
    "quest_progress",
    "recent_activity",
)

CONTRACT_DTO_TYPES = (
    "ActionResult",
    "QuestView",
    "AdventurerView",
    "GuildStatusView",
    "LoadReport",
)
