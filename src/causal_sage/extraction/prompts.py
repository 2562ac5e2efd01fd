"""
Prompt templates for the Reasoner.
"""
import json
from typing import List, Sequence

EXTRACTION_SYSTEM_PROMPT = """You are a System Dynamics Professional Modeler.
Users will give text, and it is your job to extract causal relationships from that text.
You will conduct a multi-step process:

1. Identify variables (entities) that participate in cause-effect relationships. Name variables concisely (no more than 2 words), avoid sentiment (neutral names), and minimize the number of unique variables by preferring canonical/shorter names when synonyms appear.

2. Represent each causal relationship as an object with subject, predicate, and object. Use ONLY these predicate values:
   - positive: subject and object move in the same direction (more subject -> more object, less subject -> less object)
   - negative: subject and object move in opposite directions (more subject -> less object, less subject -> more object)
   - increase: subject causes object to increase (directional effect)
   - decrease: subject causes object to decrease (directional effect)

3. When three variables are related in a sentence, ensure the relation between the second and third variable is correct. For example, in "X inhibits Y, leading to less Z", Y and Z have a positive relationship.

4. If there are no causal relationships in the provided text, return an empty array for causalRelationships.

OUTPUT FORMAT (return ONLY JSON, nothing else):
{
  "causalRelationships": [
    {
      "subject": "<variable>",
      "predicate": "increase|decrease|positive|negative",
      "object": "<variable>",
      "reasoning": "<why this relationship holds>",
      "relevant text": "<sentence of the input supporting it>"
    }
  ]
}

Example 1 input:
"when death rate goes up, population decreases"

Example 1 JSON response:
{
  "causalRelationships": [
    {"subject": "death rate", "predicate": "negative", "object": "population"}
  ]
}

Example 2 input:
"lower death rate increases population"

Example 2 JSON response:
{
  "causalRelationships": [
    {"subject": "death rate", "predicate": "negative", "object": "population"}
  ]
}

Example 3 input:
"The engineers compare the work remaining to be done against the time remaining before the deadline. The larger the gap, the more Schedule Pressure they feel. When schedule pressure builds up, engineers can work overtime. Overtime raises completion rate but also increases fatigue, which lowers productivity."

Example 3 JSON response (truncated):
{
  "causalRelationships": [
    {"subject": "work remaining", "predicate": "positive", "object": "schedule pressure"},
    {"subject": "time remaining", "predicate": "negative", "object": "schedule pressure"},
    {"subject": "schedule pressure", "predicate": "increase", "object": "overtime"},
    {"subject": "overtime", "predicate": "increase", "object": "completion rate"},
    {"subject": "overtime", "predicate": "increase", "object": "fatigue"},
    {"subject": "fatigue", "predicate": "decrease", "object": "productivity"}
  ]
}

Example 4 input (no causal relationships):
"[Text with no causal relationships]"

Example 4 JSON response:
{ "causalRelationships": [] }

Return ONLY the JSON in the exact schema shown above."""

REFORMAT_PROMPT = """You previously returned this output: {previous}

Please convert that output EXACTLY into this JSON schema: {{ "causalRelationships": [{{"subject":"<text>","predicate":"increase|decrease|positive|negative","object":"<text>"}}] }} and return ONLY the JSON.
Constraints:
- subject and object MUST be non-empty strings (<= 2 words, neutral).
- predicate MUST be exactly one of: increase, decrease, positive, negative.
- If no valid relationships exist, return {{"causalRelationships": []}}."""

LOOP_CLOSURE_PROMPT = """Review the causal relationships you extracted from the text. Does the text imply any feedback loops that are not closed by those relationships?

If so, supply ONLY the missing relationships as a JSON object keyed by number, continuing after the relationships you already returned:
{
  "<n>": {
    "reasoning": "<why this link closes a loop>",
    "causal relationship": "<subject> -->(+) <object>",
    "relevant text": "<supporting sentence from the text>"
  }
}
Use (+) when both variables move in the same direction and (-) when they move in opposite directions.
If no relationships are missing, return {}."""

MERGE_SYSTEM_PROMPT = """You are a Professional System Dynamics Modeler.
You will be provided with 3 things:
1. Multiple causal relationships between variables in a numbered list.
2. The text on which the above causal relationships are based.
3. Groups of variable names which the user believes are similar.
Your objective is to merge each group into one variable, choosing the shortest name in the group, and to rewrite every relationship with the merged names. Keep every relationship and its polarity marker.
Return ONLY JSON of the form:
{
  "1": {"causal relationship": "<subject> -->(+) <object>", "reasoning": "<optional>"}
}"""

MERGE_USER_PROMPT = """Text:
{text}
Relationships:
{relationships}
Similar Variables:
{groups}"""

VERIFICATION_SYSTEM_PROMPT = """Given the relationship below, select the options which are correct. There can be more than one option that is correct:
1. increasing {subject} increases {object}
2. decreasing {subject} decreases {object}
3. increasing {subject} decreases {object}
4. decreasing {subject} increases {object}
Respond in JSON with a key 'answers' that is a list of the correct option numbers."""

VERIFICATION_USER_PROMPT = """Relationship: {relationship}{context}"""


def format_merge_prompt(text: str, lines: Sequence[str], groups: List[List[str]]) -> str:
    numbered = "\n".join(f"{i}. {line}" for i, line in enumerate(lines, start=1))
    return MERGE_USER_PROMPT.format(text=text, relationships=numbered, groups=json.dumps(groups))


def format_verification_context(reasoning, snippet) -> str:
    parts = []
    if reasoning:
        parts.append(f"\nReasoning: {reasoning}")
    if snippet:
        parts.append(f"\nRelevant text: {snippet}")
    return "".join(parts)
