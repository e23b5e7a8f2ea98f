NUMBER_OR_NULL = {"type": ["number", "null"]}
STRING_OR_NULL = {"type": ["string", "null"]}
FRACTION = {"type": "number", "minimum": 0, "maximum": 1}

TRIGGER_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["kind", "target"],
    "properties": {
        "kind": {"type": "string", "enum": ["random_fixed", "random_curve", "other"]},
        "target": {"type": "string"},
        "mtb_days": {"type": "number"},
        "base_mtb_days": {"type": "number"},
        "curve": {
            "type": "array",
            "items": {
                "type": "array",
                "items": {"type": "number"},
                "minItems": 2,
                "maxItems": 2,
            },
        },
    },
}

STAGE_STAT_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["label", "value"],
    "properties": {
        "label": {"type": "string"},
        "value": {"type": "string"},
        "priority": {"type": "integer"},
    },
}

STAGE_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "label": STRING_OR_NULL,
        "min_severity": {"type": "number"},
        "visible": {"type": "boolean"},
        "vomit_mtb_days": {"type": "number"},
        "forget_memory_mtb_days": {"type": "number"},
        "mental_break_mtb_days": {"type": "number"},
        "death_mtb_days": {"type": "number"},
        "stats": {"type": "array", "items": STAGE_STAT_SCHEMA},
        "triggers": {"type": "array", "items": TRIGGER_SCHEMA},
    },
}

AFFLICTION_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["id"],
    "properties": {
        "id": {"type": "string"},
        "label": {"type": "string"},
        "lethal_severity": NUMBER_OR_NULL,
        "curable": {"type": "boolean"},
        "severity_per_day": NUMBER_OR_NULL,
        "stages": {"type": "array", "items": STAGE_SCHEMA},
        "triggers": {"type": "array", "items": TRIGGER_SCHEMA},
    },
}

CHEMICAL_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["id"],
    "properties": {
        "id": {"type": "string"},
        "label": {"type": "string"},
        "tolerance_affliction": STRING_OR_NULL,
        "addiction_affliction": STRING_OR_NULL,
    },
}

PSYCH_REACTION_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["id", "affliction"],
    "properties": {
        "id": {"type": "string"},
        "label": {"type": "string"},
        "affliction": {"type": "string"},
        "stages": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "label": STRING_OR_NULL,
                    "mood": {"type": "number"},
                    "opinion": {"type": "number"},
                    "visible": {"type": "boolean"},
                },
            },
        },
    },
}

DOSE_EFFECT_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["target"],
    "properties": {
        "target": {"type": "string"},
        "severity": {"type": "number"},
        "divide_by_body_size": {"type": "boolean"},
        "kind": {"type": "string", "enum": ["high", "tolerance", "other"]},
    },
}

DRUG_COMPONENT_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "addictiveness": FRACTION,
        "min_tolerance_to_addict": FRACTION,
        "overdose_severity": {
            "type": "object",
            "additionalProperties": False,
            "properties": {"min": FRACTION, "max": FRACTION},
        },
        "large_overdose_chance": FRACTION,
        "chemical": STRING_OR_NULL,
        "dose_effects": {"type": "array", "items": DOSE_EFFECT_SCHEMA},
    },
}

DRUG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["id"],
    "properties": {
        "id": {"type": "string"},
        "label": {"type": "string"},
        "category": {"type": "string"},
        "addictive": {"type": "boolean"},
        "pleasurable": {"type": "boolean"},
        "combat_enhancing": {"type": "boolean"},
        "medical": {"type": "boolean"},
        "joy": FRACTION,
        "components": {"type": "array", "items": DRUG_COMPONENT_SCHEMA},
    },
}

SNAPSHOT_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "afflictions": {"type": "array", "items": AFFLICTION_SCHEMA},
        "chemicals": {"type": "array", "items": CHEMICAL_SCHEMA},
        "psych_reactions": {"type": "array", "items": PSYCH_REACTION_SCHEMA},
        "drugs": {"type": "array", "items": DRUG_SCHEMA},
    },
}

DOSE_POLICY_ENTRY_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["drug_id"],
    "properties": {
        "drug_id": {"type": "string"},
        "allowed_for_addiction": {"type": "boolean"},
        "allowed_for_joy": {"type": "boolean"},
        "allow_scheduled": {"type": "boolean"},
        "days_frequency": {"type": "number", "minimum": 0},
        "only_if_joy_below": FRACTION,
        "only_if_mood_below": FRACTION,
        "take_to_inventory": {"type": "integer", "minimum": 0},
    },
}

POLICY_STORE_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["label", "entries"],
    "properties": {
        "label": {"type": "string"},
        "locked": {"type": "array", "items": {"type": "string"}},
        "entries": {"type": "array", "items": DOSE_POLICY_ENTRY_SCHEMA},
    },
}
