"""Per-call relay between the carrier media stream and the conversational AI agent."""
