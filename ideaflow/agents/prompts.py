"""Prompt templates for idea generation and detail expansion."""

IDEAS_TEMPLATE = """Generate exactly 3 unique, creative, and practical numbered ideas \
in response to this question: "{question}".
Focus on professional and constructive suggestions only.
Make sure each idea is different and specific.
Put each idea on its own line and do not add any other text.
Just list the ideas briefly without any additional details."""

DETAIL_TEMPLATE = """Please provide detailed suggestions and implementation guidelines \
for the following idea(s): {ideas}.
Focus on professional and constructive guidance.
For each idea, include:
1. Key features and functionality
2. Technical implementation considerations
3. Potential challenges and solutions
4. Development timeline estimate
5. Required resources and technologies"""
