"""Report formatters: pretty text, JSON and SARIF, and format selection."""