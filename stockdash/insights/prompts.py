"""Prompt templates for the narrative-analysis gateway."""

NEWS_SENTIMENT_PROMPT = """Analyze the sentiment of the following news article summaries. \
For each article, provide its "id", determine if the "sentiment" is 'positive', 'negative', \
or 'neutral', and give a brief "sentimentReasoning".

Respond with a valid JSON array. Each object in the array MUST contain ONLY the following \
three properties: "id" (string), "sentiment" (string: 'positive', 'negative', or 'neutral'), \
and "sentimentReasoning" (string).

Example of a single object in the array:
{{
  "id": "some_article_id",
  "sentiment": "positive",
  "sentimentReasoning": "The article expresses optimism about future growth."
}}

Articles to analyze:
{articles}

Your entire response MUST be a single, valid JSON array containing objects structured exactly \
as described above. Do not include any other text, explanations, or markdown formatting."""

NEWS_ARTICLE_BLOCK = "Article ID: {id}\nTitle: {title}\nSummary: {summary}"
NEWS_ARTICLE_SEPARATOR = "\n\n---\n\n"

MARKET_TRENDS_PROMPT = """Provide a concise market trends summary for {company_name}, \
considering the following recent news headlines and summaries:

{news}

Focus on:
- Key market drivers affecting the company
- Potential risks and opportunities
- Overall market perception and investor sentiment
- Recent performance indicators

Keep the summary under 150 words and provide actionable insights."""

SIMILAR_STOCKS_PROMPT = """Analyze the stock {name} ({symbol}) in the {sector} sector.

Selected Stock Details:
- Name: {name}
- Symbol: {symbol}
- Sector: {sector}
- Market Cap: {market_cap}
- Description: {description}

From the following companies, suggest 2-3 similar stocks based on:
- Same or related sector
- Similar market capitalization
- Comparable business model
- Potential for portfolio diversification

Available Companies: {candidates}

Return your answer as a JSON array of company symbols only.
Example: ["MSFT", "AMZN", "GOOGL"]
Your response must be a single, valid JSON array of strings. Do not add any conversational \
text, comments, or instructions within or around the JSON output."""

EVENT_IMPACT_PROMPT = """Analyze the potential impact of the following market event on \
stock {symbol}.

Event Details:
- Title: {title}
- Description: {description}
- Date: {date}
- Category: {category}

Provide a comprehensive analysis including:
1. Short-term impact (1-7 days)
2. Medium-term impact (1-3 months)
3. Long-term implications (6+ months)
4. Market sentiment effects
5. Trading volume expectations

Return a JSON object with ONLY the following properties:
- "impactAnalysis": string (max 150 words, comprehensive analysis of the points above)
- "predictedImpactScore": integer (-10 to 10, where -10 is very negative, 0 is neutral, \
10 is very positive)

Consider factors like: industry relevance, market conditions, historical precedents, investor \
sentiment, and fundamental vs technical impact.
Your response must be a single, valid JSON object with ONLY the two specified properties. \
Do not add any conversational text, comments, or instructions within or around the JSON output."""

STOCK_SUMMARY_PROMPT = """Generate a comprehensive investment summary for {name} ({symbol}).

Company Details:
- Name: {name}
- Symbol: {symbol}
- Sector: {sector}
- Description: {description}
- Market Cap: {market_cap}
- P/E Ratio: {pe_ratio}
- Current Price: {current_price}
- 52-Week Range: {week_range}

Provide an investment summary covering:
- Market position and competitive advantages
- Recent performance and key metrics
- Growth catalysts and opportunities
- Potential risks and challenges
- Investment thesis and outlook

Keep the summary between 100-150 words, professional and informative."""

INNOVATION_IMPACT_PROMPT = """Analyze the potential market impact of the following product \
innovation:

Company: {company_name}
Innovation Title: {title}
Innovation Description: {description}

Provide analysis covering:
- Market opportunity and addressable market size
- Competitive differentiation and advantages
- Potential revenue impact and timeline
- Market adoption challenges and barriers
- Impact on company valuation and stock price
- Competitive response expectations

Deliver a concise but comprehensive analysis (75-100 words) focusing on investment \
implications."""

RECOMMENDATION_PROMPT = """Provide an investment recommendation for {name} ({symbol}).

Stock Information:
- Current Price: {current_price}
- Market Cap: {market_cap}
- P/E Ratio: {pe_ratio}
- Sector: {sector}
- 52-Week Range: {week_range}

Market Conditions: {market_conditions}

Return a JSON object with ONLY the following properties:
- "recommendation": string ("buy", "hold", or "sell")
- "confidence": number (1-10, where 10 is highest confidence)
- "reasoning": string (brief explanation, max 100 words)

Base your recommendation on fundamental analysis, technical indicators, and current market \
conditions.
Your response must be a single, valid JSON object with ONLY the three specified properties. \
Do not add any conversational text, comments, or instructions within or around the JSON output."""

SECTOR_TRENDS_PROMPT = """Analyze current trends and outlook for the {sector} sector over \
the {timeframe} timeframe.

Include analysis of:
- Key growth drivers and headwinds
- Regulatory environment and policy impacts
- Technological disruptions and innovations
- Market valuations and investor sentiment
- Top performers and laggards in the sector
- Investment opportunities and risks

Provide a comprehensive sector analysis (150-200 words) with actionable insights for \
investors."""

RISK_ASSESSMENT_PROMPT = """Assess the investment risk for {name} ({symbol}).

Stock Details:
- Sector: {sector}
- Market Cap: {market_cap}
- P/E Ratio: {pe_ratio}
- Description: {description}

Return a JSON object with ONLY the following properties:
- "riskLevel": string ("low", "medium", or "high")
- "riskFactors": array of strings (top 3-5 risk factors)
- "riskScore": number (1-10, where 10 is highest risk)
- "mitigationStrategies": array of strings (2-3 risk mitigation approaches)

Consider factors like volatility, sector stability, competitive position, financial health, \
and market conditions.
Your response must be a single, valid JSON object with ONLY the four specified properties. \
Do not add any conversational text, comments, or instructions within or around the JSON output."""
