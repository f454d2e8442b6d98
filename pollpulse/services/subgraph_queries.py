"""
GraphQL queries for the PollPulse subgraph.
"""

# Global stats ID in the subgraph (hex encoded "global")
GLOBAL_STATS_ID = "0x676c6f62616c"

POLL_FIELDS = """
      id
      pollId
      question
      options
      votes
      endTime
      isActive
      status
      totalFundingAmount
      fundingType
      votingType
      createdAt
      creator {
        id
      }
"""

GET_POLLS = f"""
  query GetPolls($first: Int!, $skip: Int!, $where: Poll_filter, $orderBy: Poll_orderBy, $orderDirection: OrderDirection) {{
    polls(first: $first, skip: $skip, where: $where, orderBy: $orderBy, orderDirection: $orderDirection) {{
{POLL_FIELDS}
    }}
  }}
"""

GET_POLL = f"""
  query GetPoll($pollId: BigInt!) {{
    polls(first: 1, where: {{ pollId: $pollId }}) {{
{POLL_FIELDS}
    }}
  }}
"""

GET_POLL_FUNDINGS = """
  query GetPollFundings($pollId: BigInt!, $first: Int!) {
    fundings(first: $first, where: { poll_: { pollId: $pollId } }, orderBy: timestamp, orderDirection: asc) {
      funder {
        id
      }
      token {
        id
        decimals
      }
      amount
      timestamp
    }
  }
"""

GET_GLOBAL_STATS = """
  query GetGlobalStats($id: ID!) {
    globalStats(id: $id) {
      totalPolls
      totalVotes
      totalFunding
      totalDistributions
      totalUsers
      totalVoters
      totalFunders
    }
  }
"""
