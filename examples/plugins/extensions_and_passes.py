"""Extensions add syntax; text passes post-process the serialized output."""

from escapade import compose_plugins, create_markdown_system, default_text_processing, get_preset

# Built-in extensions by name
system = create_markdown_system(["strikethrough", "table_row_splitting"])
print(system.round_trip("Some ~~old~~ text\n\n| a | b |\n| - | - |"))
print("Passes:", system.serializer.pass_names)

# Replace the default chain: defaults first, then arrows everywhere
arrows = create_markdown_system(
    text_processing=compose_plugins(default_text_processing(), get_preset("arrows"))
)
print(arrows.round_trip("parse --> tree --> markdown"))
