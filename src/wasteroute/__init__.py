"""wasteroute: collection route planning for approved waste reports."""
