"""
API Gateway Service package for the PathWise Access Layer.

The gateway fronts the career dashboard's calls to third-party providers:
- News: tech and job-market headlines (NewsAPI)
- Market data: quotes, history, trending tickers (Polygon) and symbol
  suggestions (Alpha Vantage)
- AI: career-coach chat (Gemini) and resume content (OpenAI)

Structure:
- app.main: FastAPI app, routes and wiring.
- app.gateway: ProviderGateway (key check, cache, HTTP call, error kinds)
  and the tolerant aggregation helper.
- app.caching: Time-windowed response cache.
- app.adapters: Per-provider request builders, embedded-error detection
  and shaping.
- app.news, app.market_data, app.chat: Domain services used by routes.
- app.domain: Normalized result types.
"""
