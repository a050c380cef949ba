SIGN_IN = """
mutation($credentials: LoginInput!) {
    signIn(credentials: $credentials) {
        ... on AuthPayload {
            accessToken
            refreshToken
            expiresIn
        }
        ... on ErrorResponse {
            error
        }
    }
}
"""

SIGN_UP = """
mutation($credentials: LoginInput!) {
    signUp(credentials: $credentials) {
        ... on AuthPayload {
            accessToken
            refreshToken
            expiresIn
        }
        ... on ErrorResponse {
            error
        }
    }
}
"""

ADD_WORD = """
mutation($newWord: DictionaryInput!) {
    addWord(newWord: $newWord) {
        ... on SuccessResponse {
            message
        }
        ... on ErrorResponse {
            error
        }
    }
}
"""

GET_TRANSLATION = """
query($word: String!) {
    getTranslation(word: $word) {
        ... on SuccessResponse {
            message
        }
        ... on ErrorResponse {
            error
        }
    }
}
"""

START_TRAINING = """
query {
    startTraining {
        ... on TrainingSession {
            word
            completed
            total
        }
        ... on ErrorResponse {
            error
        }
        ... on SuccessResponse {
            message
        }
    }
}
"""

SUBMIT_ANSWER = """
mutation($answer: String!) {
    submitAnswer(answer: $answer) {
        ... on TrainingSession {
            word
            completed
            total
        }
        ... on ErrorResponse {
            error
        }
        ... on SuccessResponse {
            message
        }
    }
}
"""

STOP_TRAINING = """
mutation {
    stopTraining {
        ... on SuccessResponse {
            message
        }
        ... on ErrorResponse {
            error
        }
    }
}
"""

GET_RANDOM_TRANSLATION = """
query {
    getRandomTranslation
}
"""
