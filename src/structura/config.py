"""Default configuration settings for the structura tool."""

DEFAULT_CONFIG = {
	# Source host access
	"github": {
		"api_url": "https://api.github.com",
		"raw_url": "https://raw.githubusercontent.com",
		# Branch tried first when the repository metadata gives none
		"default_branch": "main",
		# Retried once when the default branch tree cannot be fetched
		"fallback_branch": "master",
		# Per-request timeout in seconds
		"timeout": 15,
		"user_agent": "Structura-App",
	},
	# Dependency enrichment over a sample of repository files
	"dependencies": {
		# Maximum number of files selected for parsing
		"parse_limit": 50,
		# Maximum number of selected files actually fetched (must not exceed parse_limit)
		"fetch_limit": 20,
		# Maximum number of file fetches in flight at once
		"max_concurrency": 8,
		"parsable_extensions": ["ts", "tsx", "js", "jsx", "mjs", "py", "go", "rs", "java", "vue", "svelte"],
	},
	# Optional AI file summaries
	"analysis": {
		"gemini_model": "gemini-2.0-flash",
		"gemini_api_url": "https://generativelanguage.googleapis.com/v1beta/models",
		# Characters of file content embedded in the prompt
		"max_prompt_chars": 3000,
		# Characters of file content handed to the analyzer at all
		"max_content_chars": 5000,
		"temperature": 0.1,
		"max_output_tokens": 500,
		"timeout": 30,
	},
}
