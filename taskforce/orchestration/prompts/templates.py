"""
Prompt templates for the orchestration stages.

Templates are plain format strings; builders.py fills them in.
"""

AVAILABLE_ROLES_TEXT = (
    "'researcher' (gathers facts and background information), "
    "'analyst' (analyzes information and summarizes findings) and "
    "'writer' (drafts sections of a report)"
)

NO_PRIOR_CONTEXT = "No prior context."

CONTEXT_SEPARATOR = "\n\n---\n\n"


# =============================================================================
# Decompose
# =============================================================================

DECOMPOSE_ROLE_TAGGED_TEMPLATE = """You are an expert AI project manager. Your job is to take a complex user request and break it down into a series of discrete, sequential sub-tasks that can be executed by specialized AI agents.
The available agents are: {roles}.
For the given request, create a JSON array of sub-tasks. Each object in the array must have exactly two keys: "role" (one of the available agents) and "task" (a clear, concise instruction for that agent).
Respond with the JSON array only, without additional text, explanations or markdown formatting. Make sure the JSON is valid.

User request: "{goal}"
"""

DECOMPOSE_PLAIN_TEMPLATE = """You are an expert AI project manager. Your job is to take a complex user request and break it down into a series of discrete, sequential sub-tasks that can be executed one after another by an AI agent.
For the given request, create a JSON array of strings. Each string must be a clear, concise instruction for one sub-task, in the order they should be executed.
Respond with the JSON array only, without additional text, explanations or markdown formatting. Make sure the JSON is valid.

User request: "{goal}"
"""


# =============================================================================
# Execute
# =============================================================================

EXECUTE_TEMPLATE = """You are a world-class AI agent{persona}. You will be given the results of the previous steps as context, followed by your current task.
Provide a concise, direct, well-formatted and accurate result for your current task only.

--- PRIOR CONTEXT ---
{context}

--- YOUR CURRENT TASK ---
{task}
"""

PERSONA_TEMPLATE = " acting as the '{role}'"

CONTEXT_ENTRY_TEMPLATE = 'Result of the {agent} for the task "{description}":\n{result}'


# =============================================================================
# Summarize
# =============================================================================

SUMMARIZE_TEMPLATE = """You are the 'finalizer' AI agent. Your job is to take all of the results produced by the previous agents and compile them into a complete, well-structured and coherent final report that fulfils the user's original goal.
The report must be in Markdown, using headings (#, ##, ###), bullet lists (*) and bold text (**) for readability.
Start with a main title and a brief summary of the completed goal.

--- ORIGINAL GOAL ---
{goal}

--- RESULTS TO COMPILE ---
{results}

--- FINAL REPORT (MARKDOWN) ---
"""
